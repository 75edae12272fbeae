"""
GestureNet: lightweight MLP for gesture classification.

Architecture:
    Input  : 63 features (21 wrist-relative landmarks × 3)
    FC1    : 128 units, BatchNorm, ReLU, Dropout(0.3)
    FC2    : 64 units, BatchNorm, ReLU, Dropout(0.2)
    FC3    : 32 units, ReLU
    Output : num_classes (softmax applied in predict_proba)

Checkpoints are dicts with ``model_state_dict``, ``labels`` and
``input_dim``; the label order matches the output units.
"""

import logging
import os

import torch
import torch.nn as nn

logger = logging.getLogger(__name__)

DEFAULT_INPUT_DIM = 63


class GestureNet(nn.Module):
    """Lightweight MLP for hand gesture classification."""

    def __init__(self, input_dim=DEFAULT_INPUT_DIM, num_classes=5,
                 dropout1=0.3, dropout2=0.2):
        super().__init__()
        self.input_dim = input_dim
        self.num_classes = num_classes

        self.features = nn.Sequential(
            nn.Linear(input_dim, 128),
            nn.BatchNorm1d(128),
            nn.ReLU(inplace=True),
            nn.Dropout(dropout1),

            nn.Linear(128, 64),
            nn.BatchNorm1d(64),
            nn.ReLU(inplace=True),
            nn.Dropout(dropout2),

            nn.Linear(64, 32),
            nn.ReLU(inplace=True),
        )

        self.classifier = nn.Linear(32, num_classes)

        self._init_weights()

    def _init_weights(self):
        for m in self.modules():
            if isinstance(m, nn.Linear):
                nn.init.kaiming_normal_(m.weight, nonlinearity="relu")
                if m.bias is not None:
                    nn.init.zeros_(m.bias)
            elif isinstance(m, nn.BatchNorm1d):
                nn.init.ones_(m.weight)
                nn.init.zeros_(m.bias)

    def forward(self, x):
        """Forward pass.

        Args:
            x: Tensor of shape (batch, input_dim)

        Returns:
            Tensor of shape (batch, num_classes), raw logits
        """
        x = self.features(x)
        x = self.classifier(x)
        return x

    def predict_proba(self, x):
        """Softmax probabilities in eval mode, shape (batch, num_classes)."""
        self.eval()
        with torch.no_grad():
            logits = self.forward(x)
            return torch.softmax(logits, dim=1)

    def save_checkpoint(self, path, labels):
        """Write a checkpoint that load_checkpoint() can restore.

        Args:
            path: Destination .pth file
            labels: Class labels in output-unit order
        """
        if len(labels) != self.num_classes:
            raise ValueError(
                "Expected %d labels, got %d" % (self.num_classes, len(labels))
            )
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        torch.save({
            "model_state_dict": self.state_dict(),
            "labels": list(labels),
            "input_dim": self.input_dim,
            "num_classes": self.num_classes,
        }, path)
        logger.info("GestureNet checkpoint saved to %s", path)

    @classmethod
    def load_checkpoint(cls, path, device="cpu"):
        """Load a trained model from checkpoint.

        Args:
            path: Path to .pth checkpoint file
            device: Device to load onto ('cpu' or 'cuda')

        Returns:
            (model in eval mode, list of labels)
        """
        checkpoint = torch.load(path, map_location=device)
        if not isinstance(checkpoint, dict) or "model_state_dict" not in checkpoint:
            raise ValueError("%s is not a GestureNet checkpoint" % path)

        labels = list(checkpoint.get("labels", []))
        state_dict = checkpoint["model_state_dict"]
        num_classes = state_dict["classifier.weight"].shape[0]
        input_dim = checkpoint.get("input_dim", DEFAULT_INPUT_DIM)
        if len(labels) != num_classes:
            raise ValueError(
                "Checkpoint has %d output units but %d labels" % (num_classes, len(labels))
            )

        model = cls(input_dim=input_dim, num_classes=num_classes)
        model.load_state_dict(state_dict)
        model.to(device)
        model.eval()
        logger.info("Loaded GestureNet (%d classes) from %s", num_classes, path)
        return model, labels
