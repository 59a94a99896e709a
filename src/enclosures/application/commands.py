"""Application commands (use cases) for enclosure design."""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from enclosures.domain import (
    BandpassResult,
    EnclosureConfig,
    EnclosureDesigner,
    EnclosureDesignError,
    MaterialEstimator,
    PortedResult,
)
from enclosures.domain.services import noise_estimate, port_velocity
from enclosures.infrastructure.driver_repository import DriverRepositoryError
from enclosures.infrastructure.panel_nesting import (
    NestingConfig,
    PanelNester,
    generate_cut_list,
)

from .config import config_to_driver, config_to_enclosure, config_to_nesting
from .dtos import BatchOutput, DesignOutput, PortNoise

if TYPE_CHECKING:
    from enclosures.domain import DesignResult
    from enclosures.infrastructure.driver_repository import DriverRepository

    from .config import EnclosureConfiguration


logger = logging.getLogger(__name__)


class DesignEnclosureCommand:
    """Command to design one enclosure and lay out its panels.

    Runs the designer, expands the panel list into a cut list, nests the
    pieces onto sheets and estimates material. Fatal design errors are
    returned in ``DesignOutput.errors`` rather than raised.
    """

    def __init__(
        self,
        designer: EnclosureDesigner | None = None,
        material_estimator: MaterialEstimator | None = None,
    ) -> None:
        self.designer = designer or EnclosureDesigner()
        self.material_estimator = material_estimator or MaterialEstimator()

    def execute(
        self,
        config: EnclosureConfig,
        nesting: NestingConfig | None = None,
        name: str = "enclosure",
    ) -> DesignOutput:
        """Execute the design command.

        Args:
            config: Domain inputs for the design.
            nesting: Sheet nesting options. Defaults to 4'x8' sheets with a
                1/8" kerf; pass a config with ``enabled=False`` to skip nesting.
            name: Project label carried on the output.

        Returns:
            DesignOutput with the design, panels, cut list, nesting result and
            material estimate, or with errors if the design could not be built.
        """
        estimator = self.material_estimator
        if nesting is None:
            nesting = NestingConfig()
        else:
            estimator = MaterialEstimator(sheet_area=nesting.sheet.area, kerf=nesting.kerf)

        try:
            design = self.designer.design(config)
        except EnclosureDesignError as e:
            logger.error("Design '%s' failed: %s", name, e)
            return DesignOutput(name=name, config=config, errors=[str(e)])

        panels = self.designer.generate_panels(config, design)
        return DesignOutput(
            name=name,
            config=config,
            design=design,
            panels=panels,
            cut_list=generate_cut_list(panels),
            nesting=PanelNester(nesting).nest(panels) if nesting.enabled else None,
            material=estimator.estimate(panels),
            port_noise=self._port_noise(config, design),
        )

    def execute_configuration(
        self,
        configuration: EnclosureConfiguration,
        repository: DriverRepository | None = None,
    ) -> DesignOutput:
        """Resolve a loaded configuration's driver and run the design."""
        name = configuration.name
        try:
            driver = config_to_driver(configuration.driver, repository)
            config = config_to_enclosure(configuration, driver)
            nesting = config_to_nesting(configuration)
        except (ValueError, EnclosureDesignError, DriverRepositoryError) as e:
            logger.error("Configuration '%s' is not designable: %s", name, e)
            return DesignOutput(name=name, config=None, errors=[str(e)])
        return self.execute(config, nesting, name=name)

    @staticmethod
    def _port_noise(config: EnclosureConfig, design: DesignResult) -> PortNoise | None:
        if not isinstance(design, (PortedResult, BandpassResult)):
            return None
        port = design.port
        xmax = config.driver.xmax
        if port is None or xmax is None:
            return None
        cone_area = math.pi * (config.driver.cutout_diameter / 2) ** 2 * config.driver_count
        velocity = port_velocity(port.area, cone_area, xmax, port.requested_tuning)
        return PortNoise(velocity=velocity, level=noise_estimate(velocity))


class BatchDesignRunner:
    """Runs independent designs concurrently.

    Each configuration is designed on a worker thread; outputs are returned in
    input order. A failure in one design is recorded on its output and does
    not stop the others. Drivers resolved to size defaults are written to the
    shared repository, whose lock serializes those writes.
    """

    def __init__(
        self,
        command: DesignEnclosureCommand | None = None,
        repository: DriverRepository | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.command = command or DesignEnclosureCommand()
        self.repository = repository
        self.max_workers = max_workers

    def run(self, configurations: list[EnclosureConfiguration]) -> BatchOutput:
        if not configurations:
            return BatchOutput()
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            outputs = list(pool.map(self._run_one, configurations))
        batch = BatchOutput(outputs=outputs)
        logger.info(
            "Batch complete: %d succeeded, %d failed",
            len(batch.succeeded),
            len(batch.failed),
        )
        return batch

    def _run_one(self, configuration: EnclosureConfiguration) -> DesignOutput:
        return self.command.execute_configuration(configuration, self.repository)
