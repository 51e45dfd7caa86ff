"""
Single entry point for pattern generation.

One call runs the whole pipeline for one raster:

    resolve family -> merge options -> seed noise and geometry RNG
    -> new Raster -> family generator -> post-processing -> seam check

Generation problems never raise out of :meth:`GenerationService.generate`;
they come back as a :class:`GenerationResult` with ``ok == False``.
Unknown family names fall back to woodland and the result carries a
warning.  A failed post-processing step keeps the raster as the family
generator left it.
"""

import logging
import random
import time

log = logging.getLogger(__name__)

from . import post_processor
from . import seamless_verifier
from .config import DEFAULT_FAMILY
from .noise_field import NoiseField
from .palettes import canonical_family
from .patterns import FAMILIES, PatternOptions, merge_options
from .raster import Raster, RasterAccessError

_SEED_RANGE = 2 ** 31


class GenerationResult:
    """
    Outcome of one generation request.

    Attributes:
        ok:        False if the request failed; ``raster`` is then None.
        raster:    The finished Raster (owned by the caller).
        seamless:  Seam check result (False when the check was skipped).
        family:    Canonical family that actually ran.
        seed:      Seed used for noise and geometry.
        options:   Resolved PatternOptions.
        error:     Failure message, or None.
        warnings:  List of caller-facing warning strings.
        elapsed:   Wall-clock seconds.

    Unpacks as ``raster, seamless`` for callers that only want those.
    """

    __slots__ = ('ok', 'raster', 'seamless', 'family', 'seed', 'options',
                 'error', 'warnings', 'elapsed')

    def __init__(self, ok, raster=None, seamless=False, family=None, seed=None,
                 options=None, error=None, warnings=None, elapsed=0.0):
        self.ok = ok
        self.raster = raster
        self.seamless = seamless
        self.family = family
        self.seed = seed
        self.options = options
        self.error = error
        self.warnings = list(warnings or [])
        self.elapsed = elapsed

    def __iter__(self):
        yield self.raster
        yield self.seamless

    def __repr__(self):
        if not self.ok:
            return "GenerationResult(failed, family={}, error={!r})".format(
                self.family, self.error)
        return "GenerationResult({}, seed={}, seamless={}, {!r})".format(
            self.family, self.seed, self.seamless, self.raster)


class GenerationService:
    """
    Runs generation requests.

    The service holds no per-request state, so one instance may serve
    several threads; every call builds its own Raster, NoiseField and
    random.Random.

    Args:
        verify:       Run the seam check on each result.
        post_process: Apply contrast and sharpness.
    """

    def __init__(self, verify=True, post_process=True):
        self.verify = verify
        self.post_process = post_process
        self._seed_source = random.Random()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_family(name):
        """
        Map a requested family name to a registered one.

        Returns:
            (canonical_name, warning) where warning is None unless the
            name was not recognised and woodland was substituted.
        """
        family = canonical_family(name)
        if family in FAMILIES:
            return family, None
        message = "Unknown pattern family {!r}, using {}".format(name, DEFAULT_FAMILY)
        log.warning(message)
        return DEFAULT_FAMILY, message

    def new_seed(self, exclude=None):
        seed = self._seed_source.randrange(_SEED_RANGE)
        while seed == exclude:
            seed = self._seed_source.randrange(_SEED_RANGE)
        return seed

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def generate(self, family, options=None):
        """
        Generate one pattern raster.

        Args:
            family:  Family name (case-insensitive; aliases accepted).
            options: dict of options (sliders, colors, width, height,
                     seed, texture and family-specific extras) or a
                     PatternOptions.  Omitted fields use family defaults.

        Returns:
            :class:`GenerationResult`.
        """
        started = time.time()
        canonical, warning = self.resolve_family(family)
        warnings = [warning] if warning else []

        opts = None
        seed = None
        raster = None
        try:
            opts = merge_options(canonical, options)
            seed = opts.seed if opts.seed is not None else self.new_seed()
            opts.seed = seed
            raster = Raster(opts.width, opts.height, fill=opts.base_color)
            FAMILIES[canonical](raster, opts, NoiseField(seed), random.Random(seed))
        except RasterAccessError as exc:
            log.error("Raster unavailable for %s: %s", canonical, exc)
            return self._failure(canonical, seed, opts, raster, exc, warnings, started)
        except Exception as exc:
            log.exception("Pattern synthesis failed for %s (seed %s)", canonical, seed)
            return self._failure(canonical, seed, opts, raster, exc, warnings, started)

        if self.post_process:
            if not post_processor.apply(raster, opts.contrast, opts.sharpness):
                warnings.append("Post-processing skipped; raster returned unadjusted")

        seamless = False
        if self.verify:
            try:
                seamless = seamless_verifier.check(raster)
            except RasterAccessError as exc:
                log.error("Raster unreadable after generating %s: %s", canonical, exc)
                return self._failure(canonical, seed, opts, raster, exc, warnings, started)
            if not seamless:
                warnings.append("Raster may show a visible seam when tiled")

        elapsed = time.time() - started
        log.info("Generated %s %dx%d seed=%s seamless=%s in %.2fs",
                 canonical, raster.width, raster.height, seed, seamless, elapsed)
        return GenerationResult(True, raster=raster, seamless=seamless,
                                family=canonical, seed=seed, options=opts,
                                warnings=warnings, elapsed=elapsed)

    def regenerate(self, result, options=None):
        """
        Re-run a previous request with a fresh seed.

        Args:
            result:  A GenerationResult, or a family name.
            options: Options to use instead of the previous result's.

        Returns:
            :class:`GenerationResult`.
        """
        if isinstance(result, GenerationResult):
            family = result.family
            previous = result.seed
            base = options if options is not None else result.options
        else:
            family = result
            previous = None
            base = options
        if isinstance(base, PatternOptions):
            base = base.as_dict()
        base = dict(base or {})
        base['seed'] = self.new_seed(exclude=previous)
        return self.generate(family, base)

    def _failure(self, family, seed, opts, raster, exc, warnings, started):
        if raster is not None:
            raster.close()
        return GenerationResult(False, family=family, seed=seed, options=opts,
                                error=str(exc) or exc.__class__.__name__,
                                warnings=warnings,
                                elapsed=time.time() - started)


# ---------------------------------------------------------------------------
# Module-level convenience
# ---------------------------------------------------------------------------

_DEFAULT_SERVICE = GenerationService()


def generate(family, options=None):
    """Generate with a shared default :class:`GenerationService`."""
    return _DEFAULT_SERVICE.generate(family, options)


def regenerate(result, options=None):
    """Regenerate with the shared default :class:`GenerationService`."""
    return _DEFAULT_SERVICE.regenerate(result, options)
