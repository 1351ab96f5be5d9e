#!/usr/bin/env python3
"""Command-line interface for inspecting surveys and checking candidates."""

import sys
import argparse

from .dispatcher import evaluate_candidate
from .photometry import proxy_magnitude
from .records import ModelRecord, ObservedProperties, Position
from .registry import get_registry
from .selection_run import SelectionRun
from .strategy import DEFAULT_MASS_FIELDS, SurveyStrategy
from .survey_config import ConfigurationError


def list_surveys(args):
    """List all registered surveys."""
    surveys = get_registry().list_surveys()

    if not surveys:
        print("No surveys registered")
        return 0

    print("Available surveys:")
    for identifier, strategy in sorted(surveys.items()):
        description = getattr(strategy, "parameters", None)
        description = description.description if description is not None else ""
        print(f"  {identifier:15} {description}")
    return 0


def show_survey(args):
    """Print the field of view, footprint and limits of one survey."""
    active = get_registry().activate(args.survey)
    print(SelectionRun(active).summary())

    if isinstance(active.strategy, SurveyStrategy):
        params = active.strategy.parameters
        print(f"  footprint: {params.footprint.area():.2f} deg^2 in {len(params.footprint)} fields")
        for rect in params.footprint:
            print(f"    {rect.name or '-':8} RA {rect.ra_min:g} - {rect.ra_max:g}, "
                  f"Dec {rect.dec_min:g} - {rect.dec_max:g}")
        print(f"  minimum mass: {params.min_mass:.3g} Msun ({' + '.join(params.mass_fields)})")
        print(f"  magnitude limit: {params.mag_limit:g} (proxy {params.proxy_mag_limit:g})")
        if params.z_max is not None:
            print(f"  redshift limit: {params.z_max:g}")
    return 0


def check_candidate(args):
    """Run the selection stages on a single candidate."""
    strategy = get_registry().lookup(args.survey)
    position = Position(dc=args.dc, ra=args.ra, dec=args.dec)
    params = getattr(strategy, "parameters", None)
    fields = params.mass_fields if params is not None else DEFAULT_MASS_FIELDS
    mass_to_light = params.mass_to_light if params is not None else 1.0
    # the whole mass goes into the first component
    model = ModelRecord({name: (args.mass if i == 0 else 0.0) for i, name in enumerate(fields)})

    def observe(position, model):
        mag = args.mag
        if mag is None:
            mag = float(proxy_magnitude(args.mass, position.dc, mass_to_light))
        return ObservedProperties(mag=mag, zobs=args.zobs)

    decision = evaluate_candidate(strategy, position, model, observe)
    if decision.accepted:
        print(f"accepted by {strategy.name}")
    else:
        print(f"rejected by {strategy.name} at {decision.rejected_at.label}")
    return 0 if decision.accepted else 2


def validate_config(args):
    """Load a run configuration and activate its survey."""
    run = SelectionRun.from_config(args.config)
    print(run.summary())
    return 0


def wrap_with_error_handling(func):
    """Wrapper reporting configuration errors instead of raising them."""
    def wrapper(args):
        try:
            return func(args)
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 1
    return wrapper


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Survey selection for mock galaxy catalogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  survey-selection list
  survey-selection show gama
  survey-selection check gama --dc 1000 --ra 135 --dec 0 --mass 1e10 --mag 19.5
  survey-selection validate config/examples/gama_run.yaml
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List registered surveys")
    list_parser.set_defaults(func=list_surveys)

    show_parser = subparsers.add_parser("show", help="Show survey geometry and limits")
    show_parser.add_argument("survey", help="Survey identifier")
    show_parser.set_defaults(func=wrap_with_error_handling(show_survey))

    check_parser = subparsers.add_parser("check", help="Check a single candidate")
    check_parser.add_argument("survey", help="Survey identifier")
    check_parser.add_argument("--dc", type=float, required=True, help="Comoving distance in Mpc")
    check_parser.add_argument("--ra", type=float, required=True, help="Right ascension in degrees")
    check_parser.add_argument("--dec", type=float, required=True, help="Declination in degrees")
    check_parser.add_argument("--mass", type=float, required=True, help="Stellar mass in Msun")
    check_parser.add_argument("--mag", type=float, help="Apparent magnitude (default: proxy estimate)")
    check_parser.add_argument("--zobs", type=float, default=0.0, help="Observed redshift (default: 0)")
    check_parser.set_defaults(func=wrap_with_error_handling(check_candidate))

    validate_parser = subparsers.add_parser("validate", help="Validate a run configuration")
    validate_parser.add_argument("config", help="Run configuration file path")
    validate_parser.set_defaults(func=wrap_with_error_handling(validate_config))

    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
