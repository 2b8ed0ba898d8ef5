# outbound_checker/report/json_report.py

"""
Генерация JSON-отчёта для проекта OutboundChecker.

Сериализация объекта OutboundReport в файл.
"""
import json
from pathlib import Path

from outbound_checker.aggregator import OutboundReport


def render_json(report: OutboundReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект OutboundReport с результатами проверки
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
