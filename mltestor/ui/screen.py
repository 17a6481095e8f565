from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from PIL import Image

from mltestor import config
from mltestor.schemas.prediction import ClassificationOutcome
from mltestor.services.cv_service import ClassificationError, ModelLoadError, cv_service
from mltestor.ui.dispatch import MainThreadDispatcher
from mltestor.utils.result_formatter import format_outcome

logger = logging.getLogger(__name__)


@dataclass
class ButtonView:
    title: str
    clicks: int = 0


@dataclass
class ImageView:
    image: Optional[Image.Image] = None


@dataclass
class LabelView:
    text: str = ""
    text_color: str = "red"
    font_size: int = 18


@dataclass(frozen=True)
class ActionSheet:
    title: str
    actions: Tuple[str, ...]
    cancel: str


class ClassifierScreen:
    """
    The single screen of the app: a gallery button, an image view and a
    result label.

    Views are created on first use and mutated in place afterwards, so there
    is never more than one of each. They are only touched from the UI
    thread; inference runs on ``executor`` and its completion is applied
    through ``dispatcher``.
    """

    def __init__(
        self,
        service=None,
        executor=None,
        dispatcher: Optional[MainThreadDispatcher] = None,
        top_k: Optional[int] = None,
        picker_available: bool = True,
    ):
        self.service = service or cv_service
        self.executor = executor or ThreadPoolExecutor(
            max_workers=config.INFERENCE_WORKERS,
            thread_name_prefix="inference",
        )
        self.dispatcher = dispatcher or MainThreadDispatcher()
        self.top_k = config.TOP_K if top_k is None else top_k
        self.picker_available = picker_available

        self.gallery_button: Optional[ButtonView] = None
        self.image_view: Optional[ImageView] = None
        self.classification_label: Optional[LabelView] = None

        self.inference_disabled = False
        self.requests_submitted = 0

    def view_did_load(self) -> None:
        self.add_gallery_button()

    def add_gallery_button(self) -> ButtonView:
        if self.gallery_button is None:
            self.gallery_button = ButtonView(title=config.GALLERY_BUTTON_TITLE)
        return self.gallery_button

    def add_image_view(self, image: Image.Image) -> ImageView:
        if self.image_view is None:
            self.image_view = ImageView()
        self.image_view.image = image
        return self.image_view

    def _result_label(self) -> LabelView:
        if self.classification_label is None:
            self.classification_label = LabelView()
        return self.classification_label

    def on_gallery_button_clicked(self) -> ActionSheet:
        self.add_gallery_button().clicks += 1
        return ActionSheet(
            title=config.ACTION_SHEET_TITLE,
            actions=(config.CHOOSE_FROM_GALLERY,),
            cancel=config.CANCEL,
        )

    def choose_action(self, choice: str) -> bool:
        """Returns True when the gallery picker should be presented."""
        if choice == config.CHOOSE_FROM_GALLERY:
            if not self.picker_available:
                logger.warning("Photo library is not available")
            return self.picker_available
        return False

    def on_image_tapped(self) -> None:
        logger.info("Image Tapped")

    def on_image_picked(self, image: Optional[Image.Image]) -> Optional[Future]:
        """Show the picked image and classify it. Picking nothing is a no-op."""
        if image is None:
            return None
        self.add_image_view(image)
        return self.update_to_latest_result(image)

    def update_to_latest_result(self, image: Image.Image) -> Optional[Future]:
        if self.inference_disabled:
            logger.warning("Inference disabled after model load failure; skipping")
            return None
        self.requests_submitted += 1
        return self.executor.submit(self._perform_classification, image)

    def _perform_classification(self, image: Image.Image) -> ClassificationOutcome:
        # Runs on the background executor.
        try:
            observations = self.service.classify(image)
        except ModelLoadError:
            self.inference_disabled = True
            logger.critical("Failed to load Vision ML model", exc_info=True)
            raise
        except ClassificationError as e:
            logger.error(f"Failed to perform classification.\n{e}")
            outcome = ClassificationOutcome(error=str(e))
        else:
            outcome = ClassificationOutcome(observations=observations)

        self.process_classifications(outcome)
        return outcome

    def process_classifications(self, outcome: ClassificationOutcome) -> None:
        """Update the label with the outcome, on the UI thread."""
        self.dispatcher.post(lambda: self._show_outcome(outcome))

    def _show_outcome(self, outcome: ClassificationOutcome) -> None:
        self._result_label().text = format_outcome(outcome, top_k=self.top_k)
