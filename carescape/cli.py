import logging
from typing import List, Optional

from contexttimer import Timer

from carescape import api, cli_output, defaults, output
from carescape.cli_input import parse_args_with_defaults
from carescape.dataframes.marker_cluster import MarkerClusterSchema
from carescape.filter import ColorFilter
from carescape.geojson import build_geojson_feature_collection, write_geojson
from carescape.logging import log_action
from carescape.map_view import DEFAULT_VIEWPORT, MapView
from carescape.story import StoryNavigator
from carescape.types import CameraCommand, MarkerId

logger = logging.getLogger(__name__)


class RecordingCamera:
    """Camera that remembers fly-to commands instead of animating them."""

    def __init__(self) -> None:
        self.commands: List[CameraCommand] = []

    def fly_to(self, command: CameraCommand) -> None:
        self.commands.append(command)


def walk_story(navigator: StoryNavigator) -> list[tuple[MarkerId, CameraCommand]]:
    """
    Visit every record from the first to the last, as pressing the right
    arrow key repeatedly would, and return the camera path.
    """
    ordered_ids = navigator.state.ordered_ids
    if not ordered_ids:
        return []

    steps: list[tuple[MarkerId, CameraCommand]] = []
    navigator.select(ordered_ids[0])
    while True:
        active_id = navigator.active_id
        assert active_id is not None
        steps.append((active_id, navigator.camera_command_for(active_id)))
        if not navigator.next():
            break
    navigator.close()
    return steps


def run(
    input_file: Optional[str],
    api_url: str,
    zoom: float,
    log_file: str,
    color_filter: ColorFilter,
    threshold: Optional[float] = None,
    story: bool = False,
) -> MapView:
    # Normalize log file path to ensure it's in the output directory
    log_file = output.normalize_path(log_file)

    # Ensure output directory exists
    output.ensure_output_dir()

    logging.basicConfig(filename=log_file, encoding="utf-8", level=logging.INFO)

    with Timer(output=logger.info, prefix="Loading color records"):
        if input_file is not None:
            records = api.load_colors_file(input_file)
        else:
            records = api.fetch_colors(api_url)
    logger.info(f"Loaded {len(records)} color records")

    navigator = StoryNavigator(RecordingCamera())
    map_view = MapView(
        navigator,
        viewport=DEFAULT_VIEWPORT._replace(zoom=zoom),
        threshold_degrees=threshold,
    )
    map_view.color_filter = color_filter

    log_action("Clustering markers", lambda: map_view.set_records(records))

    marker_cluster_dataframe = log_action(
        "Building marker cluster table",
        lambda: MarkerClusterSchema.build(map_view.clusters),
    )

    cli_output.print_results(
        marker_cluster_dataframe,
        zoom=map_view.viewport.zoom,
        threshold=map_view.threshold,
    )

    if story:
        cli_output.print_story(walk_story(navigator))

    feature_collection = build_geojson_feature_collection(map_view.clusters)
    geojson_output = output.get_geojson_path()
    write_geojson(feature_collection, geojson_output)
    logger.info(f"GeoJSON markers written to {geojson_output}")

    json_output = output.get_json_path()
    output.write_json_output(map_view.clusters, json_output)
    logger.info(f"Cluster summary written to {json_output}")

    return map_view


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args_with_defaults(
        api_url=defaults.COLORS_API_URL,
        zoom=defaults.DEFAULT_ZOOM,
        log_file=defaults.LOG_FILE,
        argv=argv,
    )

    run(
        input_file=args.input_file,
        api_url=args.api_url,
        zoom=args.zoom,
        log_file=args.log_file,
        color_filter=ColorFilter(
            name=args.name,
            material=args.material,
            location=args.location,
            color_types=frozenset(args.color_type) if args.color_type else None,
        ),
        threshold=args.threshold,
        story=args.story,
    )


if __name__ == "__main__":
    main()
