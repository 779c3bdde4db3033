"""
Shared fixtures for building statement documents in memory.
"""

import io

import PyPDF2
import pytest


def _escape(line):
    return line.replace('\\', '\\\\').replace('(', '\\(').replace(')', '\\)')


def build_pdf(lines, user_password=None, owner_password="owner-secret"):
    """
    Build a one-page PDF with each line drawn in Helvetica.

    Args:
        lines: Text lines, top to bottom
        user_password: Encrypt with this user password when not None
        owner_password: Owner password used when encrypting

    Returns:
        PDF bytes
    """
    content = ["BT", "/F1 10 Tf", "14 TL", "40 800 Td"]
    for line in lines:
        content.append(f"({_escape(line)}) Tj T*")
    content.append("ET")
    stream = "\n".join(content).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 842] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
    ]

    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    out += b"".join(b"%010d 00000 n \n" % offset for offset in offsets)
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)

    if user_password is None:
        return out

    reader = PyPDF2.PdfReader(io.BytesIO(out))
    writer = PyPDF2.PdfWriter()
    for page in reader.pages:
        writer.add_page(page)
    writer.encrypt(user_password, owner_password)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_pdf():
    """Factory fixture for in-memory PDF statements."""
    return build_pdf
