"""
MatSolver — plain-text rendering of a result trail.

Turns the dict produced by the ``build_*_result`` helpers into a readable
text block (used by the CLI and for clipboard-style export).  Trace
entries are rendered as-is; nothing here re-computes or re-rounds them.
"""

from matsolver.kernel import fmt_num


def _cell(value) -> str:
    if isinstance(value, str):
        return value
    return fmt_num(float(value))


def format_grid(data, indent: str = "    ") -> list[str]:
    """Render a grid as bracketed rows with right-aligned columns."""
    cells = [[_cell(v) for v in row] for row in data]
    if not cells:
        return []
    widths = [max(len(row[c]) for row in cells) for c in range(len(cells[0]))]
    return [
        f"{indent}[ " + "  ".join(v.rjust(w) for v, w in zip(row, widths)) + " ]"
        for row in cells
    ]


def format_steps(steps: list) -> list[str]:
    """Render trace entries: text as bullets, matrices as titled grids."""
    lines: list[str] = []
    for step in steps:
        if step.get("type") == "matrix":
            lines.append(f"  {step.get('title', '')}:")
            lines.extend(format_grid(step.get("data", [])))
        else:
            lines.append(f"  • {step.get('value', '')}")
    return lines


def build_plain_text(result: dict) -> str:
    """Convert a result dict into a readable plain-text trail."""
    lines: list[str] = []
    lines.append("=" * 56)
    lines.append(f"  MatSolver — {result.get('title', 'Result')}")
    lines.append("=" * 56)

    # GIVEN
    given = result.get("given", {})
    if given:
        lines.append("\n── GIVEN ──────────────────────────────────")
        for name, matrix in given.items():
            lines.append(f"  {name} ({matrix['rows']}x{matrix['cols']}):")
            lines.extend(format_grid(matrix["data"]))

    # STEPS
    steps = result.get("steps", [])
    lines.append("\n── STEPS ──────────────────────────────────")
    if steps:
        lines.extend(format_steps(steps))
    else:
        lines.append("  (no intermediate steps)")

    # RESULT
    final = result.get("result")
    lines.append("\n── RESULT ─────────────────────────────────")
    if final:
        if final["rows"] == 1 and final["cols"] == 1:
            lines.append(f"  {final['name']} = {_cell(final['data'][0][0])}")
        else:
            lines.append(f"  {final['name']} ({final['rows']}x{final['cols']}):")
            lines.extend(format_grid(final["data"]))
    else:
        lines.append("  ?")

    # SUMMARY
    summary = result.get("summary", {})
    if summary:
        lines.append("\n── SUMMARY ────────────────────────────────")
        lines.append(f"  Runtime: {summary.get('runtime_ms', '?')} ms")
        lines.append(f"  Steps: {summary.get('total_steps', '?')}")
        lines.append(f"  Timestamp: {summary.get('timestamp', '?')}")
        lines.append(f"  Library: {summary.get('library', '?')}")

    lines.append("\n" + "=" * 56)
    return "\n".join(lines)
