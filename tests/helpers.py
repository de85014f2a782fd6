import json

ADA = {"Name": "Dr. Ada Rao", "Designation": "Professor, Computer Science"}
BOSE = {
    "Name": "Dr. S. Bose",
    "Designation": "Associate Professor, Physics",
    "Institute": "IIT Kanpur",
    "Institute Website": "Link not working",
}


def make_source(*parts, fail_with=None, calls=None):
    """Chunk source yielding `parts`, then raising `fail_with` if given."""

    async def source(prompt, model=None):
        if calls is not None:
            calls.append({"prompt": prompt, "model": model})
        for part in parts:
            yield part
        if fail_with is not None:
            raise fail_with

    return source


def jsonl(*objs) -> str:
    return "".join(json.dumps(obj) + "\n" for obj in objs)
