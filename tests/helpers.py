"""Record builders and accessors shared by the test modules."""


def make_item(item_id, position, **extra):
    item = {"id": item_id, "position": position}
    item.update(extra)
    return item


def make_section(section_id, order, item_ids=(), name=None):
    return {
        "id": section_id,
        "name": name if name is not None else f"Section {section_id}",
        "order": order,
        "items": [make_item(item_id, i, name=item_id) for i, item_id in enumerate(item_ids)],
    }


def ids(records):
    return [r["id"] if isinstance(r, dict) else r.id for r in records]


def positions(records, key="position"):
    return [r[key] if isinstance(r, dict) else getattr(r, key) for r in records]
