"""Condensed plain-text rendering of an analysis for text-generation prompts."""

from __future__ import annotations

from pagescan.models import InputRecord, PageAnalysisResult, SelectorStrategy

BUTTON_LIMIT = 10
LINK_LIMIT = 10


def _percent(strategy: SelectorStrategy) -> str:
    return f"{round(strategy.confidence * 100)}%"


def _field_line(field: InputRecord, indent: str) -> str:
    line = (
        f"{indent}- {field.type}: {field.display_label} "
        f"[{field.selector.value}] ({_percent(field.selector)} confidence)"
    )
    if field.required:
        line += " *required"
    return line


def render_page_context(
    result: PageAnalysisResult,
    button_limit: int = BUTTON_LIMIT,
    link_limit: int = LINK_LIMIT,
) -> str:
    """
    Render ``result`` in the fixed condensed layout.

    Sections with no entries are left out; detection lines appear only for
    flags that are set. The direction line is always present.
    """
    lines = [f"URL: {result.url}", f"Title: {result.title}"]

    if result.forms:
        lines += ["", f"Forms ({len(result.forms)}):"]
        for index, form in enumerate(result.forms, start=1):
            ident = f' (id="{form.id}")' if form.id else ""
            lines.append(f"  Form {index}{ident}:")
            lines += [_field_line(field, "    ") for field in form.fields]

    if result.inputs:
        lines += ["", f"Standalone Inputs ({len(result.inputs)}):"]
        lines += [_field_line(field, "  ") for field in result.inputs]

    if result.buttons:
        shown = result.buttons[:button_limit]
        lines += ["", f"Buttons ({len(shown)}):"]
        lines += [
            f'  - "{button.text}" [{button.selector.value}] '
            f"({_percent(button.selector)} confidence)"
            for button in shown
        ]

    if result.links:
        shown_links = result.links[:link_limit]
        lines += ["", f"Links ({len(shown_links)}):"]
        lines += [f'  - "{link.text}" -> {link.href}' for link in shown_links]

    metadata = result.metadata
    lines.append("")
    if metadata.has_login:
        lines.append("Detected: Login page")
    if metadata.has_signup:
        lines.append("Detected: Signup page")
    if metadata.has_search:
        lines.append("Detected: Search functionality")
    if metadata.has_checkout:
        lines.append("Detected: Checkout/Payment page")

    direction = f"Page Direction: {metadata.direction.upper()}"
    if metadata.language:
        direction += f" ({metadata.language})"
    lines.append(direction)

    return "\n".join(lines) + "\n"
