#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Generate a dummy FDI dataset for the Africa tile map.

Writes ``examples/data/2023-fdi_flows_africa_data.csv`` with the columns
the tile map expects:

- x, y: tile grid position (column, row)
- value: FDI inflows in billion USD, or the literal ``null`` when missing
- name: country name shown in tooltips
- iso-a3: ISO code used as the tile label

Libya and Côte d'Ivoire are written as ``null`` so the Unknown class shows
up. Run from repo root with PYTHONPATH including module/:
  PYTHONPATH=module python module/examples/generate_demo_data.py
"""

import random
from pathlib import Path

import pandas as pd

OUT_PATH = Path("examples/data/2023-fdi_flows_africa_data.csv")

# (name, iso-a3, x, y): a rough geographic layout, north at the top.
COUNTRIES = [
    ("Morocco", "MAR", 2, 0),
    ("Algeria", "DZA", 3, 0),
    ("Tunisia", "TUN", 4, 0),
    ("Libya", "LBY", 5, 0),
    ("Egypt", "EGY", 6, 0),
    ("Mauritania", "MRT", 1, 1),
    ("Mali", "MLI", 2, 1),
    ("Niger", "NER", 3, 1),
    ("Chad", "TCD", 4, 1),
    ("Sudan", "SDN", 5, 1),
    ("Eritrea", "ERI", 6, 1),
    ("Cabo Verde", "CPV", 0, 2),
    ("Senegal", "SEN", 1, 2),
    ("Burkina Faso", "BFA", 2, 2),
    ("Nigeria", "NGA", 3, 2),
    ("Central African Republic", "CAF", 4, 2),
    ("South Sudan", "SSD", 5, 2),
    ("Ethiopia", "ETH", 6, 2),
    ("Djibouti", "DJI", 7, 2),
    ("Gambia", "GMB", 0, 3),
    ("Guinea", "GIN", 1, 3),
    ("Ghana", "GHA", 2, 3),
    ("Cameroon", "CMR", 3, 3),
    ("Democratic Republic of the Congo", "COD", 4, 3),
    ("Uganda", "UGA", 5, 3),
    ("Kenya", "KEN", 6, 3),
    ("Somalia", "SOM", 7, 3),
    ("Guinea-Bissau", "GNB", 0, 4),
    ("Côte d'Ivoire", "CIV", 1, 4),
    ("Togo", "TGO", 2, 4),
    ("Equatorial Guinea", "GNQ", 3, 4),
    ("Rwanda", "RWA", 4, 4),
    ("Tanzania", "TZA", 5, 4),
    ("Seychelles", "SYC", 7, 4),
    ("Sierra Leone", "SLE", 0, 5),
    ("Liberia", "LBR", 1, 5),
    ("Benin", "BEN", 2, 5),
    ("Gabon", "GAB", 3, 5),
    ("Burundi", "BDI", 4, 5),
    ("Malawi", "MWI", 5, 5),
    ("Sao Tome and Principe", "STP", 2, 6),
    ("Congo", "COG", 3, 6),
    ("Angola", "AGO", 4, 6),
    ("Zambia", "ZMB", 5, 6),
    ("Mozambique", "MOZ", 6, 6),
    ("Comoros", "COM", 7, 6),
    ("Namibia", "NAM", 3, 7),
    ("Botswana", "BWA", 4, 7),
    ("Zimbabwe", "ZWE", 5, 7),
    ("Madagascar", "MDG", 7, 7),
    ("South Africa", "ZAF", 4, 8),
    ("Eswatini", "SWZ", 5, 8),
    ("Mauritius", "MUS", 7, 8),
    ("Lesotho", "LSO", 4, 9),
]

MISSING = {"LBY", "CIV"}


def build_demo_frame(seed: int = 7) -> pd.DataFrame:
    """Return the demo dataset; values are strings exactly as in the CSV."""
    rng = random.Random(seed)
    rows = []
    for name, iso, x, y in COUNTRIES:
        if iso in MISSING:
            value = "null"
        else:
            # Skewed: most countries low, a few large recipients.
            value = f"{rng.lognormvariate(-0.7, 1.1):.2f}"
        rows.append({"x": x, "y": y, "value": value, "name": name, "iso-a3": iso})
    return pd.DataFrame(rows, columns=["x", "y", "value", "name", "iso-a3"])


def write_demo_csv(path: Path = OUT_PATH, seed: int = 7) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    build_demo_frame(seed).to_csv(path, index=False)
    return path


if __name__ == "__main__":
    out = write_demo_csv()
    print(f"Wrote {len(COUNTRIES)} rows to {out}")
