from __future__ import annotations

import xml.etree.ElementTree as ET

from cleaner.domain.ports.metadata import FlowReaderProtocol


class FlowStructureReader(FlowReaderProtocol):
    """
    Назначение/ответственность:
        Извлекает из flow-meta.xml экраны и имена полей на каждом экране.

    Ограничения:
        Поля ищутся рекурсивно: секции экрана сами являются fields со вложенными fields.
    """

    def screens(self, flow_text: str) -> dict[str, frozenset[str]]:
        try:
            root = ET.fromstring(flow_text)
        except ET.ParseError as exc:
            raise ValueError(f"Flow XML is not well-formed: {exc}") from exc

        result: dict[str, frozenset[str]] = {}
        for screen in root.iterfind("{*}screens"):
            name_node = screen.find("{*}name")
            if name_node is None or not name_node.text:
                continue
            field_names = set()
            for field_node in screen.iter():
                if field_node.tag != "fields" and not field_node.tag.endswith("}fields"):
                    continue
                field_name = field_node.find("{*}name")
                if field_name is not None and field_name.text:
                    field_names.add(field_name.text.strip())
            result[name_node.text.strip()] = frozenset(field_names)
        return result
