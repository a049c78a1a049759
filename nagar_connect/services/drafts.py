from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from nagar_connect.core.config import Settings
from nagar_connect.core.errors import NagarError, TooManyAttachments
from nagar_connect.schemas.issue import AttachmentIn, IssueCreateBody
from nagar_connect.services.classifier import Analysis, ImageClassifier
from nagar_connect.services.storage import MediaStorage, StoredFile

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.7


@dataclass
class PendingFile:
    filename: str
    content_type: Optional[str]
    data: bytes


@dataclass
class UploadOutcome:
    filename: str
    stored: Optional[StoredFile] = None
    error: Optional[str] = None


def apply_suggestion(draft: "IssueDraft", analysis: Analysis, threshold: float = CONFIDENCE_THRESHOLD) -> bool:
    """
    Merge one classification into the draft. Below the threshold nothing
    changes. At or above it the category is overwritten and a blank
    description is backfilled.
    """
    if analysis.confidence < threshold:
        return False
    draft.category = analysis.category
    if not (draft.description or "").strip():
        draft.description = analysis.description
    draft.suggestions.append(analysis)
    return True


@dataclass
class IssueDraft:
    """
    In-progress report as the submission form holds it.

    Files upload one at a time in the order given; each stored image gets its
    own classification task right away, so analyses overlap with later
    uploads and with each other. Whichever qualifying analysis lands last
    decides the category.
    """

    title: str = ""
    description: str = ""
    location: str = ""
    category: str = ""
    priority: str = "medium"
    attachments: List[StoredFile] = field(default_factory=list)
    suggestions: List[Analysis] = field(default_factory=list)
    max_attachments: int = 5
    threshold: float = CONFIDENCE_THRESHOLD
    _tasks: Set[asyncio.Task] = field(default_factory=set, repr=False, init=False)

    @classmethod
    def from_settings(cls, settings: Settings, **fields) -> "IssueDraft":
        return cls(
            max_attachments=settings.max_attachments,
            threshold=settings.classification_threshold,
            **fields,
        )

    async def add_files(
        self,
        files: List[PendingFile],
        storage: MediaStorage,
        classifier: ImageClassifier,
        folder: str,
    ) -> List[UploadOutcome]:
        if len(self.attachments) + len(files) > self.max_attachments:
            raise TooManyAttachments(self.max_attachments)

        outcomes = []
        for f in files:
            try:
                stored = await storage.upload(f.data, f.content_type, f.filename, folder)
            except NagarError as exc:
                logger.info("Upload of %s rejected: %s", f.filename, exc.message)
                outcomes.append(UploadOutcome(filename=f.filename, error=exc.message))
                continue

            self.attachments.append(stored)
            outcomes.append(UploadOutcome(filename=f.filename, stored=stored))
            if stored.type.startswith("image/"):
                self._spawn(classifier, stored.url)
        return outcomes

    def _spawn(self, classifier: ImageClassifier, url: str) -> None:
        task = asyncio.create_task(self._analyze(classifier, url))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _analyze(self, classifier: ImageClassifier, url: str) -> None:
        analysis = await classifier.classify(url)
        applied = apply_suggestion(self, analysis, self.threshold)
        logger.debug("Suggestion %s (%.2f) for %s applied=%s", analysis.category, analysis.confidence, url, applied)

    async def settle(self) -> None:
        """Wait for every classification still in flight."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending)

    def to_submission(self) -> IssueCreateBody:
        return IssueCreateBody(
            title=self.title,
            description=self.description,
            location=self.location,
            category=self.category,
            priority=self.priority,
            attachments=[AttachmentIn(url=a.url, id=a.id) for a in self.attachments],
        )
