"""Equipment classifiers: the vision model client and the heuristic fallback."""

from medassess.classifiers.base import Classifier
from medassess.classifiers.gemini import GeminiVisionClassifier
from medassess.classifiers.heuristic import HeuristicClassifier

__all__ = ["Classifier", "GeminiVisionClassifier", "HeuristicClassifier"]
