from .statistics import analyze
