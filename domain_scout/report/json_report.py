# domain_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта DomainScout.

Сериализация ScanReport (или готового списка DomainResult) в файл.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence, Union

from domain_scout.aggregator import DomainResult, ScanReport


def render_json(report: Union[ScanReport, Sequence[DomainResult]], output_path: Path | str) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект ScanReport или список DomainResult
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from domain_scout.report.json_report import render_json
    report_path = render_json(report, 'reports/domains.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(report, ScanReport):
        data = report.to_dict()
    else:
        data = {"results": [r.to_dict() for r in report]}

    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
