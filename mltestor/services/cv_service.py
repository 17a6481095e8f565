from typing import List, Optional
from pathlib import Path
import threading
import numpy as np
from PIL import Image, ImageOps
from ultralytics import YOLO
import torch
import logging

from mltestor import config
from mltestor.schemas.prediction import ClassificationResult

logger = logging.getLogger(__name__)


class ModelLoadError(RuntimeError):
    """The bundled model could not be loaded. Not recoverable."""


class ClassificationError(RuntimeError):
    """A single classification request failed."""


class CVService:
    """On-device image classification backed by the bundled YOLO model."""

    def __init__(self, model_path=None, device: Optional[str] = None):
        """Initialize CV service. The model itself is loaded on first use."""
        self.model: Optional[YOLO] = None
        self.model_path = Path(model_path or config.MODEL_PATH)
        self.device = device or config.DEVICE or (
            "cuda" if torch.cuda.is_available() else "cpu"
        )
        self._load_lock = threading.Lock()
        logger.info(f"CV Service initialized. Device: {self.device}")

    def load_model(self) -> None:
        """
        Load the YOLO classification model from disk.

        Raises:
            ModelLoadError: If the model file is missing or cannot be loaded
        """
        if not self.model_path.exists():
            logger.error(f"Model file not found at: {self.model_path}")
            raise ModelLoadError(f"Model file not found at: {self.model_path}")

        try:
            logger.info(f"Loading model from {self.model_path}")
            model = YOLO(str(self.model_path), task="classify")
            model.to(self.device)
        except Exception as e:
            logger.error(f"Failed to load model: {str(e)}")
            raise ModelLoadError(f"Model loading failed: {str(e)}") from e

        self.model = model
        logger.info("Model loaded successfully")

    def is_loaded(self) -> bool:
        """Check if model is loaded."""
        return self.model is not None

    def ensure_loaded(self) -> None:
        """Load the model once, on the first inference request."""
        if self.is_loaded():
            return
        with self._load_lock:
            if not self.is_loaded():
                self.load_model()

    @staticmethod
    def prepare_image(image: Image.Image) -> Image.Image:
        """Apply the EXIF orientation and convert to RGB."""
        image = ImageOps.exif_transpose(image)
        if image.mode != "RGB":
            image = image.convert("RGB")
        return image

    def classify(self, image: Image.Image) -> List[ClassificationResult]:
        """
        Classify a single image.

        Cropping and scaling are left to the framework's classification
        transforms (resize, then center crop to ``IMAGE_SIZE``).

        Args:
            image: PIL Image object

        Returns:
            Observations ordered by descending confidence. May be empty.

        Raises:
            ModelLoadError: If the model cannot be loaded
            ClassificationError: If the prediction itself fails
        """
        self.ensure_loaded()

        try:
            image = self.prepare_image(image)

            results = self.model.predict(
                source=image,
                imgsz=config.IMAGE_SIZE,
                device=self.device,
                verbose=False
            )

            if len(results) == 0 or results[0].probs is None:
                return []

            result = results[0]
            scores = result.probs.data.cpu().numpy()

            # Highest confidence first
            order = np.argsort(-scores, kind="stable")

            observations = []
            for class_id in order:
                confidence = float(np.clip(scores[class_id], 0.0, 1.0))
                if confidence < config.CONFIDENCE_THRESHOLD:
                    break
                observations.append(
                    ClassificationResult(
                        label=str(result.names[int(class_id)]),
                        confidence=confidence
                    )
                )

        except Exception as e:
            logger.error(f"Prediction failed: {str(e)}")
            raise ClassificationError(f"Prediction failed: {str(e)}") from e

        if observations:
            top = observations[0]
            logger.info(f"Prediction: {top.label} ({top.confidence:.2f})")
        else:
            logger.info("Prediction: nothing above threshold")

        return observations


# Global service instance
cv_service = CVService()
