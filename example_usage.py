"""
Example usage of docx-vars.

This demonstrates how to fill placeholders in a .docx template
programmatically.
"""

import sys
from pathlib import Path

from docx_vars import DocxSession


def example_fill(template: Path, output: Path) -> None:
    """Fill a template's document body, headers and footers."""

    with DocxSession(template) as session:
        print(f"Parts: {[part.local_name for part in session.list_parts()]}")
        print(f"Placeholders: {session.unresolved_placeholders()}")

        # Global replacement in the document body, headers and footers
        session.set_values({
            "CUSTOMER": "Ada Lovelace",
            "DATE": "18 October 2026",
        })

        # Footer-only replacement
        session.set_value_footer("PAGE_NOTE", "Confidential")

        for change in session.get_changes():
            print(change.summary())

        # Anything left over shows as its bare name instead of ${NAME}
        session.clean_tag_vars()

        result = session.save(output)
        print(f"Saved to {result}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python example_usage.py <template.docx> <output.docx>")
        sys.exit(2)
    example_fill(Path(sys.argv[1]), Path(sys.argv[2]))
