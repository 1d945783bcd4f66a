"""
Exporters and renderers for finished spans.
"""
