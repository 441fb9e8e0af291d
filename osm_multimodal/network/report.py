import logging
from dataclasses import dataclass, field
from typing import Set

from ..utils.logging import log_value_list


@dataclass
class ConversionReport:
    """
    Non-fatal problems collected during a single conversion.

    Unrecognized tag values are stored once each. Inconsistent source data
    is only counted. The report is logged once, by category, after link
    synthesis.

    Attributes:
        unknown_highways: highway values with no way parameters.
        unknown_railways: railway values with no way parameters.
        unknown_ways: tag values of ways carrying neither highway nor railway.
        unknown_maxspeed_tags: maxspeed values that could not be parsed.
        unknown_lanes_tags: lanes values that could not be parsed.
        invalid_way_count_nodes: thinning visits to nodes with way_count < 1.
        missing_way_nodes: way node refs absent from the node set.
        missing_link_endpoints: spans skipped because an endpoint is not a vertex.
        num_nodes: vertices created before connectivity cleaning.
        num_links: links created before connectivity cleaning.
    """

    unknown_highways: Set[str] = field(default_factory=set)
    unknown_railways: Set[str] = field(default_factory=set)
    unknown_ways: Set[str] = field(default_factory=set)
    unknown_maxspeed_tags: Set[str] = field(default_factory=set)
    unknown_lanes_tags: Set[str] = field(default_factory=set)
    invalid_way_count_nodes: int = 0
    missing_way_nodes: int = 0
    missing_link_endpoints: int = 0
    num_nodes: int = 0
    num_links: int = 0

    def log_summary(self, log: logging.Logger) -> None:
        log.info("= conversion statistics: ==========================")
        log.info(f"# nodes created: {self.num_nodes}")
        log.info(f"# links created: {self.num_links}")

        log_value_list(
            log,
            "The following highway-types had no defaults set and were thus NOT converted:",
            self.unknown_highways,
        )
        log_value_list(
            log,
            "The following railway-types had no defaults set and were thus NOT converted:",
            self.unknown_railways,
        )
        log_value_list(
            log,
            "The way-types with the following tags had no defaults set and were thus NOT converted:",
            self.unknown_ways,
        )
        log_value_list(
            log,
            "The following maxspeed tags could not be parsed and were ignored:",
            self.unknown_maxspeed_tags,
        )
        log_value_list(
            log,
            "The following lanes tags could not be parsed and were ignored:",
            self.unknown_lanes_tags,
        )

        if self.invalid_way_count_nodes:
            log.warning(
                f"{self.invalid_way_count_nodes} way nodes with less than 1 way were left untouched."
            )
        if self.missing_way_nodes:
            log.warning(
                f"{self.missing_way_nodes} way node references were not found in the node set."
            )
        if self.missing_link_endpoints:
            log.warning(
                f"{self.missing_link_endpoints} links were skipped because an endpoint was not a network node."
            )

        log.info("= end of conversion statistics ====================")
