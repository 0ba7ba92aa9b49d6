"""
fieldcheck Classifier
=====================

Groups fields into buckets, one per validation type.

A field joins every bucket named in its ``data-validate`` list. Independently
of that list, certain markers imply membership: a field
carrying ``data-length`` joins ``length``, ``data-date`` joins ``date``,
``required`` joins ``required``, and ``data-format="numeric"`` or
``data-format="alphanumeric"`` joins the bucket of that name. Implied
membership is a union with the declared list and never duplicates a field
already in the bucket.

Example:
    <input data-validate="numeric" data-length="1,5">

    buckets = classify([field])
    list(buckets)          # ["numeric", "length"]
    buckets.types_for(field)  # ["numeric", "length"]
"""

from __future__ import annotations

from typing import (
    Dict,
    Iterable,
    Iterator,
    List,
    Sequence,
    Tuple,
)

from fieldcheck.utils.helpers import contains_identity
from fieldcheck.utils.logger import get_logger
from fieldcheck.validation.fields import (
    VALIDATE_ATTRIBUTE,
    FieldDescriptor,
    declared_types,
    field_label,
    implies,
)
from fieldcheck.validation.settings import IMPLIED_TYPES, ImpliedEntry

logger = get_logger("fieldcheck")


def check_order(
    field: FieldDescriptor,
    attribute: str = VALIDATE_ATTRIBUTE,
    implied: Sequence[ImpliedEntry] = IMPLIED_TYPES,
) -> List[str]:
    """
    The types a field is checked against, in tie-break order.

    Declared types come first, left to right, followed by implied types
    that were not declared, in implied-table order.
    """
    types = declared_types(field, attribute)
    for entry in implied:
        type_name = entry[1]
        if type_name not in types and implies(field, entry):
            types.append(type_name)
    return types


class BucketMap:
    """
    Ordered mapping of validation type to member fields.

    Buckets and members keep insertion order. Fields are compared by
    identity, so the same control is never listed twice in a bucket no
    matter how often it is registered.
    """

    def __init__(
        self,
        attribute: str = VALIDATE_ATTRIBUTE,
        implied: Sequence[ImpliedEntry] = IMPLIED_TYPES,
    ) -> None:
        self.attribute = attribute
        self.implied = tuple(implied)
        self._buckets: Dict[str, List[FieldDescriptor]] = {}
        self._fields: List[FieldDescriptor] = []

    def add(self, type_name: str, field: FieldDescriptor) -> bool:
        """
        Put a field in one bucket.

        Returns:
            True if the field was added, False if it was already there
        """
        bucket = self._buckets.setdefault(type_name, [])
        if contains_identity(bucket, field):
            return False
        bucket.append(field)
        if not contains_identity(self._fields, field):
            self._fields.append(field)
        return True

    def register_field(self, field: FieldDescriptor) -> List[str]:
        """
        Classify one field and add it to its buckets.

        Safe to call again for a field already registered.

        Returns:
            The field's types in check order
        """
        types = self.types_for(field)
        for type_name in types:
            self.add(type_name, field)
        return types

    def unregister_field(self, field: FieldDescriptor) -> bool:
        """
        Remove a field from every bucket. Emptied buckets are dropped.

        Returns:
            True if the field was registered
        """
        if not contains_identity(self._fields, field):
            return False

        self._fields = [f for f in self._fields if f is not field]
        for type_name in list(self._buckets):
            members = [f for f in self._buckets[type_name] if f is not field]
            if members:
                self._buckets[type_name] = members
            else:
                del self._buckets[type_name]
        return True

    def types_for(self, field: FieldDescriptor) -> List[str]:
        return check_order(field, self.attribute, self.implied)

    @property
    def fields(self) -> List[FieldDescriptor]:
        """All registered fields, in registration order."""
        return list(self._fields)

    def get(self, type_name: str) -> List[FieldDescriptor]:
        return list(self._buckets.get(type_name, []))

    def items(self) -> Iterator[Tuple[str, List[FieldDescriptor]]]:
        for type_name, members in self._buckets.items():
            yield type_name, list(members)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._buckets

    def __getitem__(self, type_name: str) -> List[FieldDescriptor]:
        return list(self._buckets[type_name])

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._buckets))

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        sizes = ", ".join(f"{k}={len(v)}" for k, v in self._buckets.items())
        return f"<BucketMap {sizes}>"

    def as_dict(self) -> Dict[str, List[str]]:
        """Bucket contents by field label."""
        return {
            type_name: [field_label(f) for f in members]
            for type_name, members in self._buckets.items()
        }


def classify(
    fields: Iterable[FieldDescriptor],
    attribute: str = VALIDATE_ATTRIBUTE,
    implied: Sequence[ImpliedEntry] = IMPLIED_TYPES,
) -> BucketMap:
    """
    Partition fields into validation buckets.

    Fields with no declared types and no implying attribute are left out.

    Args:
        fields: Fields in document order
        attribute: Attribute holding the comma-separated type list
        implied: Entries whose marker implies membership (see ``implies``)

    Returns:
        BucketMap keyed by type name
    """
    buckets = BucketMap(attribute, implied)
    for field in fields:
        buckets.register_field(field)

    logger.debug("Fields classified", buckets=buckets.as_dict())
    return buckets
