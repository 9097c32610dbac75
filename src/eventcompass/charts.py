# src/eventcompass/charts.py

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from eventcompass.config import DEFAULT_CONFIG


def category_colors(categories: list[str], config: dict = None) -> list[str]:
    """Anzeigefarben zu Kategorien; unbekannte Kategorien werden grau."""
    palette = (config or DEFAULT_CONFIG).get('category_colors', {})
    return [palette.get(cat, '#9ca3af') for cat in categories]


def create_pie_chart(values: list[int], labels: list[str], filename: str, colors: list[str] = None, subtitle: str = None):
    """
    Erstellt ein Tortendiagramm und speichert es als PNG.
    :param values: Liste der Werte (z.B. Termine je Kategorie).
    :param labels: Zugehörige Labels (z.B. ["meeting","health"]).
    :param filename: Pfad zur Ausgabedatei, z.B. "categories.png".
    :param colors: (Optional) Liste von Farben für die Segmente.
    :param subtitle: (Optional) Text, der unter das Diagramm geschrieben wird.
    """
    total = sum(values)
    fig, ax = plt.subplots()
    # Wenn keine Daten da sind, ein Platzhalter-Bild anlegen
    if total == 0:
        ax.text(0.5, 0.5, "No data", ha="center", va="center", fontsize=14)
        ax.axis("off")
    else:
        ax.pie(values, labels=labels, autopct="%1.1f%%", colors=colors)
        ax.axis("equal")
    if subtitle:
        fig.text(0.5, 0.02, subtitle, ha="center", va="bottom", fontsize=22, fontweight='bold')
    fig.savefig(filename, bbox_inches="tight")
    plt.close(fig)


def create_category_chart(counts: dict[str, int], filename: str, config: dict = None):
    """Tortendiagramm der Kategorienverteilung (siehe statistics.count_by_category)."""
    labels = sorted(counts)
    values = [counts[label] for label in labels]
    create_pie_chart(values, labels, filename, colors=category_colors(labels, config), subtitle="Categories")
