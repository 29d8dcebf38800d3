from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Tuple

from .colors import COLOR_DISTANCE_THRESHOLD, dominant_color_from_url, nearest_variant
from .draft_store import ProductDraftStore
from .models import BatchReport, UnassignedImage, UploadedFile, Variant
from .utils import logger

# url -> dominant color (#rrggbb) or None
Analyzer = Callable[[str], Optional[str]]


def match_by_filename(original_name: str, variants: Iterable[Variant]) -> Optional[Variant]:
    name = (original_name or "").lower()
    for v in variants:
        if v.color and v.color.lower() in name:
            return v
    return None


class ImageAssignmentPipeline:
    """Routes uploaded photos to variants of the draft held by `store`.

    Filename hits are assigned right away. Everything else goes through the
    dominant color analysis, which only annotates a suggestion; the author
    confirms it with accept_suggestion() or assign_manually(). The photos not
    yet placed live in `unassigned`.
    """

    def __init__(
        self,
        store: ProductDraftStore,
        analyzer: Optional[Analyzer] = None,
        threshold: float = COLOR_DISTANCE_THRESHOLD,
    ):
        self.store = store
        self.analyzer = analyzer or dominant_color_from_url
        self.threshold = threshold
        self._unassigned: List[UnassignedImage] = []

    @property
    def unassigned(self) -> List[UnassignedImage]:
        return list(self._unassigned)

    def get(self, image_id: str) -> Optional[UnassignedImage]:
        for img in self._unassigned:
            if img.id == image_id:
                return img
        return None

    async def _analyse(self, image: UnassignedImage, variants: List[Variant]) -> UnassignedImage:
        try:
            dominant = await asyncio.to_thread(self.analyzer, image.url)
        except Exception as e:
            logger.warning(f"color analysis failed for {image.original_name}: {type(e).__name__}: {e}")
            return image
        if not dominant:
            return image

        match = nearest_variant(dominant, variants, self.threshold)
        if match is None:
            return replace(image, dominant_color=dominant)
        logger.debug(
            f"{image.original_name}: {dominant} close to {match.variant.color} (distance {match.distance:.1f})"
        )
        return replace(
            image,
            dominant_color=dominant,
            suggested_variant_id=match.variant.id,
            suggested_variant_color=match.variant.color,
        )

    def _merge(self, images: Iterable[UnassignedImage]) -> None:
        pool = list(self._unassigned)
        index = {img.id: i for i, img in enumerate(pool)}
        for img in images:
            if img.id in index:
                pool[index[img.id]] = img
            else:
                index[img.id] = len(pool)
                pool.append(img)
        self._unassigned = pool

    async def process_batch(
        self,
        uploads: Iterable[UploadedFile],
        failed: Iterable[UnassignedImage] = (),
    ) -> BatchReport:
        report = BatchReport()
        pending: List[UnassignedImage] = []

        # 1) filename
        for f in uploads:
            variant = match_by_filename(f.original_name, self.store.draft.variants)
            if variant is None:
                pending.append(UnassignedImage.from_upload(f))
                continue
            current = self.store.draft.variant(variant.id)
            if current is not None and f.url in current.images:
                report.redundant += 1
                report.notices.append(
                    f'"{f.original_name}" já existe na variante "{variant.color}". Adicionando a não atribuídas.'
                )
                pending.append(UnassignedImage.from_upload(f))
                continue
            self.store.add_image_to_variant(variant.id, f.url)
            report.auto_assigned += 1
            report.notices.append(
                f'"{f.original_name}" atribuída automaticamente à variante "{variant.color}".'
            )

        # 2) dominant color, all files of the batch at once
        variants = list(self.store.draft.variants)
        analysed: List[UnassignedImage] = []
        if pending:
            analysed = list(await asyncio.gather(*(self._analyse(img, variants) for img in pending)))

        errored = list(failed)
        report.failed = len(errored)
        report.suggested = sum(1 for img in analysed if img.suggested_variant_id)
        report.unassigned = sum(1 for img in analysed if not img.suggested_variant_id)
        report.unassigned_images = analysed + errored

        self._merge(report.unassigned_images)

        if report.failed:
            report.notices.append(f"{report.failed} imagem(ns) não puderam ser enviadas.")
        logger.info(
            f"image batch: {report.auto_assigned} auto-assigned, {report.suggested} suggested, "
            f"{report.unassigned} unassigned, {report.redundant} redundant, {report.failed} failed"
        )
        return report

    def process_batch_sync(
        self,
        uploads: Iterable[UploadedFile],
        failed: Iterable[UnassignedImage] = (),
    ) -> BatchReport:
        return asyncio.run(self.process_batch(uploads, failed))

    def remove_unassigned(self, image_id: str) -> bool:
        before = len(self._unassigned)
        self._unassigned = [img for img in self._unassigned if img.id != image_id]
        return len(self._unassigned) != before

    def assign_manually(self, variant_id: str, image_id: str) -> Tuple[bool, str]:
        image = self.get(image_id)
        if image is None:
            return False, "Imagem não encontrada entre as não atribuídas."
        if image.error:
            return False, f'A imagem "{image.original_name}" falhou no envio e não pode ser atribuída.'

        variant = self.store.draft.variant(variant_id)
        if variant is None:
            return False, "Não foi possível encontrar a variante para atribuir a imagem."
        if image.url in variant.images:
            return False, f'A imagem "{image.original_name}" já está atribuída à variante {variant.color}.'
        holder = self.store.variant_holding(image.url)
        if holder is not None:
            return False, f'A imagem "{image.original_name}" já está atribuída à variante {holder.color}.'

        self.store.add_image_to_variant(variant_id, image.url)
        self._unassigned = [
            img for img in self._unassigned if img.id != image.id and img.url != image.url
        ]
        return True, f'A imagem "{image.original_name}" foi atribuída à variante {variant.color}.'

    def accept_suggestion(self, image_id: str) -> Tuple[bool, str]:
        image = self.get(image_id)
        if image is None or not image.suggested_variant_id:
            return False, "Nenhuma sugestão para esta imagem."
        return self.assign_manually(image.suggested_variant_id, image_id)
