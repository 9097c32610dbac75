from eventcompass.charts import category_colors, create_category_chart, create_pie_chart


def test_pie_chart_written(tmp_path):
    fn = tmp_path / 'pie.png'
    create_pie_chart([3, 1], ["meeting", "health"], str(fn), colors=["#3b82f6", "#22c55e"])
    assert fn.exists() and fn.stat().st_size > 0


def test_pie_chart_placeholder_without_data(tmp_path):
    fn = tmp_path / 'empty.png'
    create_pie_chart([0, 0], ["a", "b"], str(fn), subtitle="Nothing")
    assert fn.exists() and fn.stat().st_size > 0


def test_category_colors_fallback():
    assert category_colors(["holiday", "unknown"]) == ["#ef4444", "#9ca3af"]
    cfg = {'category_colors': {'unknown': '#000000'}}
    assert category_colors(["unknown"], cfg) == ["#000000"]


def test_category_chart(tmp_path):
    fn = tmp_path / 'categories.png'
    create_category_chart({"meeting": 2, "sports": 1}, str(fn))
    assert fn.exists()
