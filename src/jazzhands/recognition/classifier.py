"""
Gesture Classifier
==================

Async adapter around a trained GestureNet checkpoint. Loading and
inference run in the default executor so the event loop never blocks.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import torch

from .gesture_net import GestureNet
from .types import Prediction

logger = logging.getLogger(__name__)


@dataclass
class GestureClassifierConfig:
    """Gesture classifier configuration."""
    model_path: str = "models/gesture_net.pth"
    device: str = "auto"  # auto, cpu or cuda
    top_k: int = 3

    @classmethod
    def from_dict(cls, config: dict) -> "GestureClassifierConfig":
        """Create config from dictionary."""
        return cls(
            model_path=config.get("model_path", "models/gesture_net.pth"),
            device=config.get("device", "auto"),
            top_k=config.get("top_k", 3),
        )


class GestureClassifier:
    """
    Ranked gesture predictions from a pre-trained network.

    classify() never raises: an unloaded model, a feature vector of the
    wrong size or an inference error all yield an empty list.

    Example:
        >>> classifier = GestureClassifier(GestureClassifierConfig())
        >>> await classifier.load()
        >>> predictions = await classifier.classify(features)
        >>> if predictions:
        ...     print(predictions[0].label)
    """

    def __init__(self, config: Optional[GestureClassifierConfig] = None):
        self.config = config or GestureClassifierConfig()
        self._model: Optional[GestureNet] = None
        self._labels: List[str] = []
        self._device = "cpu"

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def _resolve_device(self) -> str:
        if self.config.device == "auto":
            return "cuda" if torch.cuda.is_available() else "cpu"
        return self.config.device

    async def load(self) -> bool:
        """Load the model checkpoint off the event loop.

        Returns:
            True if the model is ready for classification
        """
        path = self.config.model_path
        if not os.path.isfile(path):
            logger.error("Classifier model not found: %s", path)
            return False

        device = self._resolve_device()
        loop = asyncio.get_running_loop()
        try:
            model, labels = await loop.run_in_executor(
                None, GestureNet.load_checkpoint, path, device
            )
        except (OSError, RuntimeError, ValueError, KeyError) as e:
            logger.error("Failed to load classifier model %s: %s", path, e)
            return False

        self._model = model
        self._labels = labels
        self._device = device
        logger.info("Classifier ready on %s with labels: %s", device, ", ".join(labels))
        return True

    def set_model(self, model: GestureNet, labels: List[str]) -> None:
        """Install an already-built model (used when embedding the classifier)."""
        if len(labels) != model.num_classes:
            raise ValueError(
                f"Model has {model.num_classes} outputs but {len(labels)} labels were given"
            )
        model.eval()
        self._model = model
        self._labels = list(labels)
        self._device = next(model.parameters()).device.type

    async def classify(self, features: np.ndarray) -> List[Prediction]:
        """Rank labels for one feature vector, highest confidence first."""
        if self._model is None:
            logger.warning("Classifier not loaded, no prediction")
            return []

        features = np.asarray(features, dtype=np.float32)
        if features.shape != (self._model.input_dim,):
            logger.warning(
                "Feature vector has shape %s, model expects (%d,)",
                features.shape, self._model.input_dim,
            )
            return []

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._predict, features)
        except RuntimeError as e:
            logger.warning("Classifier inference error: %s", e)
            return []

    def _predict(self, features: np.ndarray) -> List[Prediction]:
        tensor = torch.from_numpy(features).unsqueeze(0).to(self._device)
        probs = self._model.predict_proba(tensor).cpu().numpy().squeeze(0)

        k = max(1, min(self.config.top_k, len(probs)))
        order = np.argsort(probs)[::-1][:k]
        return [Prediction(self._labels[i], float(probs[i])) for i in order]
