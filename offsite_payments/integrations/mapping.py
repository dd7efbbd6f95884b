"""Declarative canonical-to-wire field name tables."""

from typing import Dict, Iterator, Tuple, Union

from ..exceptions import DuplicateMapping, FrozenMapping, UnknownField


class FieldMapping:
    """Ordered table from canonical field names to provider wire names.

    Grouped canonicals (``customer``, ``billing_address``) are declared with a
    dict and registered as ``customer.first_name`` and so on, so that
    ``Helper.set("customer", {...})`` can fan a value out to several wire
    fields.

    Example::

        MAPPING = FieldMapping()
        MAPPING.declare("order", "ok_invoice")
        MAPPING.declare("customer", {"email": "ok_payer_email"})
        MAPPING.freeze()
    """

    def __init__(self, declarations: Dict[str, Union[str, Dict[str, str]]] = None) -> None:
        self._wire_names: Dict[str, str] = {}
        self._groups: Dict[str, Dict[str, str]] = {}
        self._frozen = False
        for canonical_name, wire_name in (declarations or {}).items():
            self.declare(canonical_name, wire_name)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def declare(self, canonical_name: str, wire_name: Union[str, Dict[str, str]]) -> None:
        """Register ``canonical_name`` under ``wire_name``.

        Args:
            canonical_name: Provider-independent field name
            wire_name: Provider field name, or a dict of sub-name to wire
                name for grouped canonicals

        Raises:
            FrozenMapping: If the table has been frozen
            DuplicateMapping: If ``canonical_name`` is already declared
        """
        if self._frozen:
            raise FrozenMapping(f"Cannot declare {canonical_name!r} on a frozen mapping")
        if canonical_name in self._wire_names or canonical_name in self._groups:
            raise DuplicateMapping(f"Field {canonical_name!r} is already declared")

        if isinstance(wire_name, dict):
            self._groups[canonical_name] = dict(wire_name)
            for sub_name, sub_wire_name in wire_name.items():
                self._wire_names[f"{canonical_name}.{sub_name}"] = sub_wire_name
        else:
            self._wire_names[canonical_name] = wire_name

    def freeze(self) -> "FieldMapping":
        self._frozen = True
        return self

    def wire_name_for(self, canonical_name: str) -> str:
        """Return the wire name declared for ``canonical_name``.

        Raises:
            UnknownField: If the canonical name was never declared
        """
        try:
            return self._wire_names[canonical_name]
        except KeyError:
            raise UnknownField(f"Undeclared field: {canonical_name!r}") from None

    def group(self, canonical_name: str) -> Dict[str, str]:
        """Return the sub-name to wire-name table of a grouped canonical."""
        try:
            return dict(self._groups[canonical_name])
        except KeyError:
            raise UnknownField(f"Undeclared field group: {canonical_name!r}") from None

    def __contains__(self, canonical_name: object) -> bool:
        return canonical_name in self._wire_names or canonical_name in self._groups

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._wire_names.items())

    def __len__(self) -> int:
        return len(self._wire_names)
