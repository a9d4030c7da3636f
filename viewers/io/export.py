from __future__ import annotations

import csv
import json
import os
from typing import Any, Dict, Iterable

import pygame


def export_screenshot(screen: pygame.Surface, path: str) -> None:
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    pygame.image.save(screen, path)


def export_history(rows: Iterable[Dict[str, Any]], path: str) -> str:
    """Write episode rows as JSON and a CSV twin next to it; returns the CSV path."""
    rows = list(rows)
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(rows, f, indent=2)
    csv_path = os.path.splitext(path)[0] + '.csv'
    with open(csv_path, 'w', encoding='utf-8', newline='') as f:
        if rows:
            w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            w.writeheader()
            for r in rows:
                w.writerow(r)
    return csv_path
