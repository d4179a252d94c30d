"""Image annotations and aggregate statistics for search results."""

from ..domain import ImageStats, SearchResult


class ResultAnnotator:
    """Decorate results with image flags and tally image coverage."""

    def annotate(self, results: list[SearchResult]) -> ImageStats:
        """Populate image fields on ``results`` in place and return totals.

        A result with an image array contributes the array length to
        ``total_images_found``; a lone primary image contributes one.
        """
        stats = ImageStats()

        for result in results:
            metadata = result.metadata
            all_images = metadata.get("all_images")
            if not isinstance(all_images, list):
                all_images = []
            all_images = [url for url in all_images if isinstance(url, str) and url]

            primary = metadata.get("primary_image")
            if not isinstance(primary, str) or not primary:
                primary = all_images[0] if all_images else None

            result.primary_image = primary
            result.all_images = all_images or ([primary] if primary else [])
            result.image_count = len(result.all_images)
            result.has_images = primary is not None

            if result.has_images:
                stats.multimodal_results_count += 1
                stats.total_images_found += len(all_images) if all_images else 1

            analysis = metadata.get("image_analysis")
            if isinstance(analysis, str) and analysis:
                result.image_analysis = analysis
                result.image_analyzed = True
                stats.analyzed_image_count += 1

            if metadata.get("visual_match"):
                result.visual_match = True
                result.visual_query_match = True

        return stats
