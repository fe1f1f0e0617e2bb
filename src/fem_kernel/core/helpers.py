from typing import Optional, Sequence

import numpy as np


def format_matrix(
    matrix: np.ndarray,
    max_size: int = 8,
    row_labels: Optional[Sequence[str]] = None,
    col_labels: Optional[Sequence[str]] = None,
) -> str:
    """
    Format a 2D array as a bordered table string with truncation.

    Parameters
    ----------
    matrix : np.ndarray
        Input array to format.
    max_size : int, optional
        Maximum number of rows/columns to show, by default 8
    row_labels, col_labels : sequence of str, optional
        Labels written in a leading column / a header line.

    Returns
    -------
    str
        The formatted table.
    """
    matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
    nrows, ncols = matrix.shape
    cell_width = 14
    ellipsis_str = f"{'...':^{cell_width}}"

    def trunc_indices(total: int):
        if total <= max_size:
            return list(range(total)), []
        n_head = max_size // 2
        n_tail = max_size - n_head - 1
        return list(range(n_head)) + list(range(total - n_tail, total)), [n_head]

    def with_cuts(values, cuts):
        out = []
        for pos, value in enumerate(values):
            if pos in cuts:
                out.append(ellipsis_str)
            out.append(value)
        return out

    def cell(num: float) -> str:
        return f"{num:{cell_width}.6e}" if abs(num) > 1e-14 else f"{0.0:{cell_width}.1f}"

    row_idx, row_cuts = trunc_indices(nrows)
    col_idx, col_cuts = trunc_indices(ncols)

    rows = [with_cuts([cell(matrix[i, j]) for j in col_idx], col_cuts) for i in row_idx]
    rows = with_cuts(rows, row_cuts)
    for pos, row in enumerate(rows):
        if row == ellipsis_str:
            rows[pos] = [ellipsis_str] * (len(col_idx) + len(col_cuts))

    widths = [cell_width] * len(rows[0])
    if row_labels is not None:
        labels = with_cuts([str(row_labels[i]) for i in row_idx], row_cuts)
        label_width = max(cell_width, *(len(label) for label in labels))
        widths.insert(0, label_width)
        rows = [[f"{label:<{label_width}}"] + row for label, row in zip(labels, rows)]

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    table_lines = [border]
    if col_labels is not None:
        header = with_cuts([f"{col_labels[j]:^{cell_width}}" for j in col_idx], col_cuts)
        if row_labels is not None:
            header.insert(0, " " * widths[0])
        table_lines.append("| " + " | ".join(header) + " |")
        table_lines.append(border)
    for row in rows:
        table_lines.append("| " + " | ".join(row) + " |")
        table_lines.append(border)
    return "\n".join(table_lines)
