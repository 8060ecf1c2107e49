from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

import attrs
import cattrs

from ..exceptions import ConversionError, UnsupportedTypeError

T = TypeVar("T")


@attrs.frozen
class Descriptor(Generic[T]):
    """The conversions between an INI value and one Python type.

    Attributes:
        name: A short name for the type, i.e. `int32`.
        type: The Python type values are converted to.
        check: Whether or not a string can be converted. Must never raise.
        convert: Convert a string for which check is true.
        format: Convert a value to its canonical string.
    """

    name: str
    type: type[T]
    check: Callable[[str], bool]
    convert: Callable[[str], T]
    format: Callable[[T], str]

    def is_convertible(self, text: str) -> bool:
        return self.check(text)

    def parse(self, text: str) -> T:
        """Convert a string to the descriptor's type.

        Raises:
            ConversionError: The string is not convertible.
        """

        if not self.check(text):
            raise ConversionError(f"'{text}' is not convertible to {self.name}")

        return self.convert(text)


class Registry:
    """A set of descriptors keyed by type.

    Each registry also keeps a cattrs converter whose hooks are the registered descriptors,
    so attrs classes with supported field types can be (un)structured from a section.

    Attributes:
        converter: The cattrs converter.
    """

    converter: cattrs.Converter

    def __init__(self):
        self._types: dict[type, Descriptor] = {}
        self._names: dict[str, Descriptor] = {}

        self.converter = cattrs.Converter(omit_if_default=True)

    def register(self, descriptor: Descriptor):
        """Register a descriptor, replacing any existing one for its type or name.

        Args:
            descriptor: The descriptor to register.
        """

        self._types[descriptor.type] = descriptor
        self._names[descriptor.name] = descriptor

        self.converter.register_structure_hook(
            descriptor.type, lambda value, _: descriptor.parse(str(value))
        )
        self.converter.register_unstructure_hook(descriptor.type, descriptor.format)

    def descriptor(self, type_: type[T]) -> Descriptor[T]:
        """Get the descriptor for a type.

        Raises:
            UnsupportedTypeError: No descriptor is registered for the type.
        """

        try:
            return self._types[type_]
        except KeyError:
            raise UnsupportedTypeError(f"no conversion registered for {type_!r}") from None

    def named(self, name: str) -> Descriptor:
        """Get a descriptor by its name.

        Raises:
            UnsupportedTypeError: No descriptor is registered under the name.
        """

        try:
            return self._names[name]
        except KeyError:
            raise UnsupportedTypeError(f"no conversion named '{name}'") from None

    def names(self) -> Iterator[str]:
        return iter(self._names)

    def is_convertible(self, text: str, type_: type) -> bool:
        return self.descriptor(type_).is_convertible(text)

    def parse(self, text: str, type_: type[T]) -> T:
        return self.descriptor(type_).parse(text)

    def format(self, value: Any) -> str:
        """Convert a value to its canonical string.

        The descriptor is looked up by the value's type, then along its MRO,
        so a subclass of a supported type is formatted like its base.

        Raises:
            UnsupportedTypeError: The value's type is not supported.
        """

        for cls in type(value).__mro__:
            if (descriptor := self._types.get(cls)) is not None:
                return descriptor.format(value)

        raise UnsupportedTypeError(f"no conversion registered for {type(value)!r}")

    def __contains__(self, type_: object) -> bool:
        return type_ in self._types
