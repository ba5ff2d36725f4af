class PanelLoadError(Exception):
    """Invalid panel configuration or lifecycle misuse."""
    pass
