"""
Console formatters for classifier results.

Every function returns a string; the CLI decides where it goes.
"""

from typing import List

import pandas as pd

from schemas.aggregates import AggregateResult, ChartPoint

RULE_WIDTH = 72


def _section(title: str) -> List[str]:
    return ['=' * RULE_WIDTH, title, '=' * RULE_WIDTH]


def _series_lines(series: List[ChartPoint]) -> List[str]:
    if not series:
        return ['  (none)']
    width = max(len(point.key) for point in series)
    return [f'  {point.key:<{width}}  {point.value:>5,}' for point in series]


def format_overview(result: AggregateResult, site: str = 'all', search: str = '') -> str:
    """
    Format the overview page: counters, status split and open-work chart.

    Args:
        result: Classifier output
        site: Site filter that produced it (header only)
        search: Search term that produced it (header only)
    """
    lines = _section('SQCB SUMMARY REPORT')
    lines.append(f"Evaluated at: {result.evaluated_at.strftime('%Y-%m-%d %H:%M UTC')}")
    lines.append(f"Site: {site}" + (f"   Search: {search!r}" if search else ''))
    lines.append(f'Records: {result.total_records:,}')

    lines.append('')
    lines.append('Categories:')
    width = max((len(name) for name in result.overview), default=0)
    for name, count in result.overview.items():
        lines.append(f'  {name:<{width}}  {count:>5,}')

    lines.append('')
    lines.append('Status:')
    lines.extend(_series_lines(result.status_series))

    lines.append('')
    lines.append('Defect quantity:')
    lines.extend(_series_lines(result.defect_quantity_series))

    return '\n'.join(lines)


def format_category(result: AggregateResult, name: str) -> str:
    """
    Format one category: its chart series and its table.

    Raises:
        KeyError: If the category does not exist
    """
    category = result[name]
    lines = _section(f'{category.name.upper()} ({category.count:,})')

    lines.append('Chart:')
    lines.extend(_series_lines(category.chart_series))

    lines.append('')
    if category.table_rows:
        df = pd.DataFrame([row.to_columns() for row in category.table_rows])
        lines.append(df.to_string(index=False))
    else:
        lines.append('No records.')

    return '\n'.join(lines)
