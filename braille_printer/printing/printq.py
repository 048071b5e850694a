"""
Print queue operations for Braille Printer.

This module owns:
- Submission: category detection, braille encoding, SVG rendering, persistence
- Listing: owner/category filtered query ordered by creation time
- Lookup: fetch by id, scoped to the owner key

It is Flask-agnostic apart from the store's connection handling; settings,
encoder and renderer are passed in at construction so tests can replace them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Tuple

from braille_printer.core import db as store
from braille_printer.core.auth import Credential
from braille_printer.core.config import PrintQSettings
from braille_printer.core.db import KIND, Query, QueueRecord, RecordNotFound, category_for
from braille_printer.printing import braille
from braille_printer.printing.render import render_svg

logger = logging.getLogger(__name__)

EncodeFn = Callable[[str, str], Tuple[str, int]]
RenderFn = Callable[[str, int, int], bytes]


@dataclass
class PrintQueue:
    settings: PrintQSettings
    encode: EncodeFn = braille.encode
    render: RenderFn = render_svg

    def _encode(self, text: str, lang: str) -> Tuple[str, int]:
        try:
            return self.encode(text, lang)
        except braille.UnsupportedLanguage:
            if self.settings.strict_lang:
                raise
            logger.warning("Unsupported lang %r; storing record without braille", lang)
            return "", 0

    def submit(self, credential: Credential, text: str, lang: str) -> QueueRecord:
        """
        Encode, render and store one submission. Returns the stored record.

        Raises UnsupportedLanguage (strict_lang only) and StoreError.
        """
        encoded, length = self._encode(text, lang)
        image = self.render(encoded, length, self.settings.canvas_size)
        record = QueueRecord(
            category=category_for(text),
            owner_key=credential.owner_key,
            original_text=text,
            encoded_text=encoded,
            rendered_image=image,
            status=0,
        )
        store.put(record)
        logger.info(
            "Queued qid=%s type=%s lang=%s cells=%d via %s",
            record.qid,
            record.category,
            lang,
            length,
            credential.source,
        )
        return record

    def list_records(self, owner_key: str, category: str = "label") -> List[QueueRecord]:
        """
        Records for `owner_key`, oldest first, capped at settings.max_query.
        `category` is 'label', 'paper', or 'all'.
        """
        query = Query(KIND).filter("owner_key", owner_key)
        if category != "all":
            query = query.filter("category", category)
        query = query.order("created_at").limit(self.settings.max_query)
        return list(store.run(query))

    def fetch(self, qid: int, owner_key: str) -> QueueRecord:
        """
        Fetch one record. A record owned by another key is reported as missing.
        """
        record = store.get(qid)
        if record.owner_key != owner_key:
            logger.info("qid=%s requested with a foreign key", qid)
            raise RecordNotFound(qid)
        return record


__all__ = ["PrintQueue"]
