"""
Document shapes understood by the sanitizer.

A document is either a plain mapping or a wrapped record that exposes its
field data through the ``Unwrappable`` capability. The sanitizer probes
for the capability once per call and rewraps the restricted data into the
same shape it received.
"""

from typing import (
    Any,
    Iterable,
    Iterator,
    Mapping,
    MutableMapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from django.core.exceptions import FieldDoesNotExist


@runtime_checkable
class Unwrappable(Protocol):
    """Capability of a wrapped record: hand out and replace its field data."""

    def unwrap(self) -> Mapping[str, Any]:
        ...

    def rewrap(self, data: Mapping[str, Any]) -> None:
        ...


class PlainRecord:
    """Adapter for plain mappings; rewrapping mutates the mapping in place."""

    def __init__(self, document: MutableMapping[str, Any]):
        self.document = document

    def unwrap(self) -> dict[str, Any]:
        return dict(self.document)

    def restrict(self, paths: Iterable[str]) -> dict[str, Any]:
        return pick_paths(self.document, paths)

    def rewrap(self, data: Mapping[str, Any]) -> Any:
        self.document.clear()
        self.document.update(data)
        return self.document

    def attach(self, name: str, value: Any) -> None:
        self.document[name] = value


class WrappedRecord:
    """Adapter for documents implementing ``Unwrappable``."""

    def __init__(self, document: Unwrappable):
        self.document = document

    def unwrap(self) -> dict[str, Any]:
        return dict(self.document.unwrap())

    def restrict(self, paths: Iterable[str]) -> dict[str, Any]:
        pick = getattr(self.document, "pick", None)
        if callable(pick):
            return dict(pick(paths))
        return pick_paths(self.unwrap(), paths)

    def rewrap(self, data: Mapping[str, Any]) -> Any:
        self.document.rewrap(data)
        return self.document

    def attach(self, name: str, value: Any) -> None:
        setattr(self.document, name, value)


Record = Union[PlainRecord, WrappedRecord]


def as_record(document: Any) -> Record:
    """
    Pick the adapter for a document.

    Raises:
        TypeError: If the document is neither a mutable mapping nor unwrappable.
    """
    if isinstance(document, Unwrappable):
        return WrappedRecord(document)
    if isinstance(document, MutableMapping):
        return PlainRecord(document)
    raise TypeError(
        f"Cannot sanitize document of type {type(document).__name__}; "
        "expected a mutable mapping or an Unwrappable record"
    )


def _assign_path(target: dict[str, Any], segments: list[str], value: Any) -> None:
    for segment in segments[:-1]:
        existing = target.get(segment)
        if not isinstance(existing, dict):
            existing = {}
            target[segment] = existing
        target = existing
    target[segments[-1]] = value


def pick_paths(data: Mapping[str, Any], paths: Iterable[str]) -> dict[str, Any]:
    """
    Restrict ``data`` to the given field paths.

    A path matching a key literally is copied as is; otherwise dotted paths
    are followed through nested mappings and rebuilt in the result.

    Example:
        >>> pick_paths({"a": 1, "b": {"c": 2, "d": 3}}, ["a", "b.c", "x"])
        {"a": 1, "b": {"c": 2}}
    """
    picked: dict[str, Any] = {}
    for path in paths:
        if path in data:
            picked[path] = data[path]
            continue

        segments = path.split(".")
        current: Any = data
        for segment in segments:
            if not isinstance(current, Mapping) or segment not in current:
                break
            current = current[segment]
        else:
            _assign_path(picked, segments, current)
    return picked


def resolve_instance_path(instance: Any, path: str) -> tuple[bool, Any]:
    """
    Read a field path from a model instance.

    Intermediate segments must be concrete relations (foreign keys and
    one-to-one fields); the last one a concrete field or a property.
    Returns ``(found, value)``; a null relation is not found.
    """
    segments = path.split(".")
    current = instance
    for segment in segments[:-1]:
        try:
            model_field = current._meta.get_field(segment)
        except FieldDoesNotExist:
            return False, None
        if not (model_field.is_relation and model_field.concrete):
            return False, None
        current = getattr(current, segment)
        if current is None:
            return False, None

    last = segments[-1]
    try:
        model_field = current._meta.get_field(last)
    except FieldDoesNotExist:
        if isinstance(getattr(type(current), last, None), property):
            return True, getattr(current, last)
        return False, None
    if not model_field.concrete:
        return False, None
    return True, model_field.value_from_object(current)


class AclDocument:
    """
    Wrapped record holding the field data of a model instance.

    Field values are available as attributes and items. The originating
    instance, if any, is kept on ``instance`` and never modified. Paths
    through relations and properties of the instance are read from it when
    the document is restricted, so ``"department.name"`` becomes
    ``{"department": {"name": ...}}``. Use ``select_related`` to avoid one
    query per related row.

    Example:
        >>> doc = AclDocument.from_instance(employee)
        >>> doc.name, doc["salary"]
    """

    def __init__(
        self, data: Optional[Mapping[str, Any]] = None, instance: Any = None
    ):
        self.__dict__["_data"] = dict(data or {})
        self.__dict__["instance"] = instance
        self.__dict__["permissions"] = None

    @classmethod
    def from_instance(cls, instance: Any) -> "AclDocument":
        """Collect the concrete field values of a Django model instance."""
        data = {}
        for model_field in instance._meta.concrete_fields:
            value = model_field.value_from_object(instance)
            data[model_field.name] = value
            if model_field.attname != model_field.name:
                data[model_field.attname] = value
        return cls(data, instance=instance)

    def unwrap(self) -> dict[str, Any]:
        return self._data

    def rewrap(self, data: Mapping[str, Any]) -> None:
        self.__dict__["_data"] = dict(data)

    def pick(self, paths: Iterable[str]) -> dict[str, Any]:
        """Restrict to ``paths``, reading the ones missing from the data off the instance."""
        paths = list(paths)
        picked = pick_paths(self._data, paths)
        if self.instance is None:
            return picked

        for path in paths:
            if path in self._data:
                continue
            found, value = resolve_instance_path(self.instance, path)
            if found:
                _assign_path(picked, path.split("."), value)
        return picked

    def to_dict(self) -> dict[str, Any]:
        result = dict(self._data)
        if self.permissions is not None:
            result["permissions"] = self.permissions
        return result

    def __getattr__(self, name: str) -> Any:
        try:
            return self.__dict__["_data"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__dict__:
            self.__dict__[name] = value
        else:
            self._data[name] = value

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AclDocument):
            return self._data == other._data
        return NotImplemented

    def __repr__(self) -> str:
        return f"AclDocument({self._data!r})"
