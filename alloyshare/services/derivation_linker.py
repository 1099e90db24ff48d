"""
Derivation Linker - Publishes models as shareable links.

Every share creates a new model that records the model it was derived from,
plus a public link and, when the text holds secret regions, a private link.

Visibility roots:
- A model containing secrets is its own root (`original = model.id`), so its
  private link exposes exactly the secrets it introduced.
- Any other model inherits the root of its parent.
- A model without parent starts a new lineage and is its own root.
"""

from alloyshare.core.model_store.base import ModelStore
from alloyshare.core.secrets import SecretExtractor
from alloyshare.models.model import Link, Model
from alloyshare.models.share import ShareResult
from alloyshare.utils.exceptions import DanglingParent, NotFoundError
from alloyshare.utils.id_generator import generate_link_id, generate_model_id
from alloyshare.utils.logger import get_logger

logger = get_logger(__name__)


class DerivationLinker:
    """
    Creates models and their links, keeping the derivation graph consistent.

    All writes of one share run in a single store transaction: either the
    model and all its links exist with `original` set, or none of them do.
    """

    def __init__(self, store: ModelStore, extractor: SecretExtractor | None = None):
        """
        Initialize derivation linker.

        Args:
            store: Model/link store
            extractor: Secret detector (default markers if omitted)
        """
        self.store = store
        self.extractor = extractor or SecretExtractor()

    async def share(self, source_text: str, parent_model_id: str | None = None) -> ShareResult:
        """
        Publish source text as a new model.

        Args:
            source_text: Full editor text, secrets included
            parent_model_id: Model the text was derived from (last executed/shared model)

        Returns:
            ShareResult with the created link ids

        Raises:
            DanglingParent: If parent_model_id does not exist (nothing is written)
        """
        model = Model(
            id=generate_model_id(),
            source_text=source_text,
            derivation_of=parent_model_id,
        )
        public_link = Link(id=generate_link_id(), model_id=model.id, is_private=False)
        private_link = None

        async with self.store.transaction():
            await self.store.insert_model(model)
            await self.store.insert_link(public_link)

            if self.extractor.contains_secret(source_text):
                private_link = Link(id=generate_link_id(), model_id=model.id, is_private=True)
                await self.store.insert_link(private_link)
                original = model.id
            elif parent_model_id is not None:
                parent = await self.store.get_model(parent_model_id)
                if parent is None:
                    raise DanglingParent(
                        f"Parent model not found: {parent_model_id}",
                        {"model_id": model.id, "parent_model_id": parent_model_id},
                    )
                original = parent.original or parent.id
            else:
                original = model.id

            await self.store.update_model(model.id, {"original": original})

        logger.bind(
            model_id=model.id,
            parent_model_id=parent_model_id,
            original=original,
            private=private_link is not None,
        ).info("Shared model")

        return ShareResult(
            public_link_id=public_link.id,
            private_link_id=private_link.id if private_link else None,
            model_id=model.id,
            original=original,
        )

    async def lineage(self, model_id: str) -> list[Model]:
        """
        Walk derivations back to the first model.

        Args:
            model_id: Model to start from

        Returns:
            Models from `model_id` (first) to the lineage's first model (last)

        Raises:
            NotFoundError: If model_id does not exist
            DanglingParent: If an ancestor is missing
        """
        model = await self.store.get_model(model_id)
        if model is None:
            raise NotFoundError(f"Model not found: {model_id}", {"model_id": model_id})

        chain = [model]
        seen = {model.id}
        while model.derivation_of is not None:
            parent_id = model.derivation_of
            if parent_id in seen:
                logger.warning(f"Derivation cycle at {parent_id}")
                break
            parent = await self.store.get_model(parent_id)
            if parent is None:
                raise DanglingParent(
                    f"Parent model not found: {parent_id}",
                    {"model_id": model.id, "parent_model_id": parent_id},
                )
            chain.append(parent)
            seen.add(parent.id)
            model = parent

        return chain

    async def root_of(self, model_id: str) -> Model:
        """
        Visibility root of a model.

        Raises:
            NotFoundError: If model_id does not exist
            DanglingParent: If the recorded root is missing
        """
        model = await self.store.get_model(model_id)
        if model is None:
            raise NotFoundError(f"Model not found: {model_id}", {"model_id": model_id})
        if model.original is None or model.original == model.id:
            return model

        root = await self.store.get_model(model.original)
        if root is None:
            raise DanglingParent(
                f"Root model not found: {model.original}",
                {"model_id": model_id, "original": model.original},
            )
        return root
