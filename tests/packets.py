"""Builders for small XMP packets used across the test modules."""

import os

FILES_DIR = os.path.join(os.path.dirname(__file__), "files")
TEST_XMP = os.path.join(FILES_DIR, "test.xmp")

HEADER = '<?xpacket begin="\ufeff" id="W5M0MpCehiHzreSzNTczkc9d"?>'
TRAILER = '<?xpacket end="w"?>'

DEFAULT_NAMESPACES = (
    'xmlns:dc="http://purl.org/dc/elements/1.1/" '
    'xmlns:xmp="http://ns.adobe.com/xap/1.0/"'
)


def description(content: str = "", attributes: str = "", namespaces: str = DEFAULT_NAMESPACES) -> str:
    return f'<rdf:Description rdf:about="" {namespaces} {attributes}>{content}</rdf:Description>'


def xmpmeta(*descriptions: str) -> str:
    return (
        '<x:xmpmeta xmlns:x="adobe:ns:meta/">'
        '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">'
        + "".join(descriptions)
        + "</rdf:RDF></x:xmpmeta>"
    )


def wrap(body: str) -> bytes:
    return (HEADER + body + TRAILER).encode("utf-8")


def packet(*descriptions: str) -> bytes:
    """A complete wrapped packet holding the given rdf:Description elements."""
    return wrap(xmpmeta(*descriptions))


def read_test_xmp() -> bytes:
    with open(TEST_XMP, "rb") as f:
        return f.read()
