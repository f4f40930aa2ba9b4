"""
Page detector: runs every contour strategy, scores the candidates and picks
the best quadrilateral, degrading to a half resolution retry and finally to a
margin-inset default rectangle.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

import cv2
import numpy as np

from common import config
from common.bounds import Bounds
from .approximator import approximate_quadrilaterals
from .fallback import FallbackChain
from .preparer import PreparedImage, prepare_image, validate_image
from .scoring import DEFAULT_WEIGHTS, score_quadrilateral
from .strategies import ContourStrategy, default_strategies, filter_contours

logger = logging.getLogger(__name__)

# Images smaller than this (shorter side, px) are not retried at half size
MIN_RETRY_SIDE = 64


class DetectionOptions:
    """
    Tunable parameters of PageDetector.

    Defaults come from the environment (see common.config); explicit keyword
    arguments always win.
    """

    def __init__(
        self,
        canny_low: Optional[int] = None,
        canny_high: Optional[int] = None,
        min_area_ratio: Optional[float] = None,
        max_area_ratio: Optional[float] = None,
        epsilon_ratio: float = 0.02,
        lenient: bool = False,
        min_score: Optional[float] = None,
        use_edge_sharpness: bool = True,
        contrast_boost: bool = False,
        retry_half_resolution: bool = True,
        default_margin_ratio: Optional[float] = None,
        use_default_fallback: bool = True,
        parallel: bool = False,
        weights: Optional[Dict[str, float]] = None
    ):
        env_low, env_high = config.canny_thresholds()
        self.canny_low = env_low if canny_low is None else canny_low
        self.canny_high = env_high if canny_high is None else canny_high
        self.min_area_ratio = config.min_area_ratio() if min_area_ratio is None else min_area_ratio
        self.max_area_ratio = config.max_area_ratio() if max_area_ratio is None else max_area_ratio
        self.epsilon_ratio = epsilon_ratio
        self.lenient = lenient
        self.min_score = config.min_score() if min_score is None else min_score
        self.use_edge_sharpness = use_edge_sharpness
        self.contrast_boost = contrast_boost
        self.retry_half_resolution = retry_half_resolution
        self.default_margin_ratio = config.default_margin() if default_margin_ratio is None else default_margin_ratio
        self.use_default_fallback = use_default_fallback
        self.parallel = parallel
        self.weights = dict(weights) if weights else dict(DEFAULT_WEIGHTS)

        if not 0.0 <= self.min_area_ratio < self.max_area_ratio <= 1.0:
            raise ValueError("Area ratios must satisfy 0 <= min_area_ratio < max_area_ratio <= 1")
        if self.canny_low >= self.canny_high:
            raise ValueError("canny_low must be lower than canny_high")

    @classmethod
    def from_env(cls, **overrides) -> "DetectionOptions":
        return cls(**overrides)

    def copy(self, **changes) -> "DetectionOptions":
        params = dict(vars(self))
        params.update(changes)
        return DetectionOptions(**params)


def default_corners(width: int, height: int, margin_ratio: float = config.DEFAULT_MARGIN) -> np.ndarray:
    """
    Corners of the whole image inset by `margin_ratio` of its shorter side.

    Used when nothing was detected: the page most likely fills the frame.
    """
    margin = min(width, height) * margin_ratio
    return Bounds(0, 0, width, height).inset(margin).corners()


class PageDetector:
    """
    Detects the four corners of a page in an image.

    Uses several independent binarization strategies, reduces their contours
    to quadrilaterals and keeps the best scoring one. The detector holds no
    state between calls and is safe to share between threads.
    """

    def __init__(self, options: Optional[DetectionOptions] = None, strategies: Optional[List[ContourStrategy]] = None):
        """
        Initialize the detector.

        Args:
            options: Detection parameters (environment defaults when None)
            strategies: Contour strategies, defaults to edge, adaptive and segmentation
        """
        self.options = options or DetectionOptions()
        if strategies is None:
            strategies = default_strategies(self.options.canny_low, self.options.canny_high)
        self.strategies = list(strategies)

    def detect(self, image: np.ndarray) -> Optional[np.ndarray]:
        """
        Detect page corners.

        Args:
            image: Gray, BGR or BGRA uint8 image (not modified)

        Returns:
            float32 array of shape (4, 2) ordered top-left, top-right,
            bottom-right, bottom-left. None only when the default fallback is
            disabled and nothing was found.

        Raises:
            InvalidImageError: for empty or unsupported input
        """
        corners, _ = self.detect_with_source(image)
        return corners

    def detect_with_source(self, image: np.ndarray) -> Tuple[Optional[np.ndarray], Optional[str]]:
        """Like detect(), also naming the fallback step that produced the corners."""
        validate_image(image)

        producers = [('full_resolution', self._detect_full_resolution)]
        if self.options.retry_half_resolution:
            producers.append(('half_resolution', self._detect_half_resolution))
        if self.options.use_default_fallback:
            producers.append(('default', self._default_for))

        chain = FallbackChain(producers)
        corners = chain.run(image)

        if chain.last_producer == 'default':
            logger.warning("No confident page candidate, using default corners")
        elif chain.last_producer is not None:
            logger.info("Page detected (%s)", chain.last_producer)
        return corners, chain.last_producer

    def _detect_full_resolution(self, image: np.ndarray) -> Optional[np.ndarray]:
        best = self.select(self.find_candidates(prepare_image(image, self.options.contrast_boost)))
        return None if best is None else best['corners']

    def _detect_half_resolution(self, image: np.ndarray) -> Optional[np.ndarray]:
        h, w = image.shape[:2]
        if min(h, w) < MIN_RETRY_SIDE:
            return None

        half = cv2.resize(image, (w // 2, h // 2), interpolation=cv2.INTER_AREA)
        best = self.select(self.find_candidates(prepare_image(half, self.options.contrast_boost)))
        if best is None:
            return None
        return (best['corners'] * 2.0).astype(np.float32)

    def _default_for(self, image: np.ndarray) -> np.ndarray:
        h, w = image.shape[:2]
        return default_corners(w, h, self.options.default_margin_ratio)

    def _run_strategy(self, strategy: ContourStrategy, prepared: PreparedImage) -> List[np.ndarray]:
        try:
            contours = strategy.extract_contours(prepared)
        except Exception:
            logger.warning("Strategy %s failed, ignoring it", strategy.name, exc_info=True)
            return []
        return filter_contours(
            contours, prepared.area, self.options.min_area_ratio, self.options.max_area_ratio, prepared.shape
        )

    def _contours_per_strategy(self, prepared: PreparedImage) -> List[List[np.ndarray]]:
        if self.options.parallel and len(self.strategies) > 1:
            with ThreadPoolExecutor(max_workers=len(self.strategies)) as pool:
                futures = [pool.submit(self._run_strategy, strategy, prepared) for strategy in self.strategies]
                return [future.result() for future in futures]
        return [self._run_strategy(strategy, prepared) for strategy in self.strategies]

    def find_candidates(self, prepared: PreparedImage) -> List[Dict]:
        """
        Scored quadrilateral candidates from every strategy, in strategy order.

        Each candidate is a dict with 'corners', 'score', 'features',
        'strategy', 'area' and 'source'.
        """
        gradient = prepared.gradient if self.options.use_edge_sharpness else None
        candidates = []

        for strategy, contours in zip(self.strategies, self._contours_per_strategy(prepared)):
            quads = approximate_quadrilaterals(contours, self.options.epsilon_ratio, self.options.lenient)

            scored_count = 0
            for quad in quads:
                scored = score_quadrilateral(quad['corners'], prepared.shape, gradient, self.options.weights)
                if scored is None:
                    continue
                scored['strategy'] = strategy.name
                scored['area'] = quad['area']
                scored['source'] = quad['source']
                candidates.append(scored)
                scored_count += 1

            logger.debug(
                "Strategy %s: %d contours, %d quadrilaterals, %d scored",
                strategy.name, len(contours), len(quads), scored_count
            )

        return candidates

    def strategy_results(self, prepared: PreparedImage) -> List[Dict]:
        """Best candidate of each strategy (corners None when it found nothing)."""
        candidates = self.find_candidates(prepared)
        results = []
        for strategy in self.strategies:
            own = [c for c in candidates if c['strategy'] == strategy.name]
            best = self._best(own)
            results.append({
                'strategy': strategy.name,
                'corners': None if best is None else best['corners'],
                'score': 0.0 if best is None else best['score'],
                'area': 0.0 if best is None else best['area'],
            })
        return results

    def select(self, candidates: List[Dict]) -> Optional[Dict]:
        """
        Highest scoring candidate above the acceptance threshold.

        Returns None when no candidate is confident enough; ties keep the
        earliest candidate so the choice is deterministic.
        """
        best = self._best(candidates)
        if best is None or best['score'] < self.options.min_score:
            if best is not None:
                logger.debug("Best candidate (%s) scored %.3f, below %.3f", best['strategy'], best['score'], self.options.min_score)
            return None
        logger.debug("Selected %s candidate with score %.3f", best['strategy'], best['score'])
        return best

    @staticmethod
    def _best(candidates: List[Dict]) -> Optional[Dict]:
        best = None
        for candidate in candidates:
            if best is None or candidate['score'] > best['score']:
                best = candidate
        return best


def detect_corners(image: np.ndarray, options: Optional[DetectionOptions] = None) -> Optional[np.ndarray]:
    """
    Detect the page corners in an image.

    Args:
        image: Gray, BGR or BGRA uint8 image
        options: Detection parameters

    Returns:
        Ordered corner set (4, 2) float32; None only with use_default_fallback=False
    """
    return PageDetector(options).detect(image)
