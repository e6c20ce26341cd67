"""General-purpose functors shared by example pipelines."""

from typing import Any, Dict

from symbolos.models.object import SymbolicObject, create_symbolic_object, utcnow


class LinkSymbols:
    """Relate two symbolic objects with a named ``SymbolicLink``."""

    id = "functor-link-symbols"
    name = "LinkSymbols"
    method = "automated"
    input_type = "LinkSymbolsInput"
    output_type = "SymbolicLink"

    def apply(self, input: Dict[str, Any], context: Any) -> SymbolicObject:
        source = input["from"]
        target = input["to"]
        relationship = input["relationship"]
        return create_symbolic_object(
            "SymbolicLink",
            id=f"link-{source.id}-{target.id}-{relationship}",
            from_id=source.id,
            to_id=target.id,
            relationship=relationship,
            root_id="link-root",
            label=input.get("label") or f"{source.type} -> {target.type}",
            description=input.get("description") or f"Linked by relationship: {relationship}",
        )

    def describe_provenance(self, input: Dict[str, Any], output: Any) -> Dict[str, Any]:
        return {
            "fromId": input["from"].id,
            "toId": input["to"].id,
            "relationship": input["relationship"],
            "timestamp": utcnow().isoformat(),
        }


link_symbols = LinkSymbols()
