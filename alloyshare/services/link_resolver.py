"""
Link Resolver - Loads the model behind a shared link.

Private links return the full text; public links return the text with every
secret region removed.
"""

from alloyshare.core.model_store.base import ModelStore
from alloyshare.core.secrets import SecretExtractor
from alloyshare.models.share import ResolvedLink
from alloyshare.utils.exceptions import DanglingParent, NotFoundError
from alloyshare.utils.logger import get_logger

logger = get_logger(__name__)


class LinkResolver:
    """Resolves link ids to the model text their holder may see."""

    def __init__(self, store: ModelStore, extractor: SecretExtractor | None = None):
        self.store = store
        self.extractor = extractor or SecretExtractor()

    async def resolve(self, link_id: str) -> ResolvedLink:
        """
        Load a shared model through a link.

        Args:
            link_id: Public or private link id

        Returns:
            ResolvedLink with the visible source text

        Raises:
            NotFoundError: If the link does not exist
            DanglingParent: If the link points at a missing model
        """
        link = await self.store.get_link(link_id)
        if link is None:
            raise NotFoundError(f"Link not found: {link_id}", {"link_id": link_id})

        model = await self.store.get_model(link.model_id)
        if model is None:
            raise DanglingParent(
                f"Link {link_id} points at missing model {link.model_id}",
                {"link_id": link_id, "model_id": link.model_id},
            )

        source_text = model.source_text
        redacted = False
        if not link.is_private:
            split = self.extractor.extract(model.source_text)
            source_text = split.public_text
            redacted = split.has_secrets

        logger.bind(model_id=model.id).info(f"Resolved link {link_id} (private={link.is_private})")

        return ResolvedLink(
            link_id=link.id,
            model_id=model.id,
            is_private=link.is_private,
            source_text=source_text,
            root_id=model.original,
            derivation_of=model.derivation_of,
            redacted=redacted,
        )
