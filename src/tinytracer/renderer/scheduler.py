# renderer/scheduler.py
"""
Parallel pixel dispatch.

A fixed pool of RenderWorker threads renders pixels for one orchestrating
thread. Every worker owns an inbound task queue and has at most one task in
flight; all workers post to a single shared result queue on which the
orchestrator blocks. The orchestrator is the only writer of the FrameBuffer.

A worker that raises takes the whole render down: the orchestrator stops
the pool and raises RenderError. There is no retry and no partial frame.
"""
import logging
import queue
import random
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from tinytracer.camera.camera import Camera
from tinytracer.core.ray import Ray
from tinytracer.core.vector import Color
from tinytracer.geometry.hittable import Hittable
from tinytracer.renderer.config import RenderConfig
from tinytracer.renderer.framebuffer import FrameBuffer
from tinytracer.renderer.shading import ray_color

logger = logging.getLogger(__name__)

# Receives (rows_dispatched, total_rows).
ProgressCallback = Callable[[int, int], None]

_STOP = None

# Seconds between liveness checks while waiting for results.
_POLL_INTERVAL = 0.5


class RenderError(RuntimeError):
    """A render could not be completed."""


@dataclass(frozen=True)
class PixelTask:
    x: int
    y: int
    # Set when the orchestrator already built the (single-sample) ray.
    ray: Optional[Ray] = None


@dataclass(frozen=True)
class PixelResult:
    worker_id: int
    task: PixelTask
    color: Color


@dataclass(frozen=True)
class WorkerFailure:
    worker_id: int
    task: PixelTask
    error: BaseException


def pixel_rng(seed: int, x: int, y: int) -> random.Random:
    """Random source for one pixel, independent of the worker that renders it."""
    return random.Random(f"{seed}:{x}:{y}")


class RenderWorker(threading.Thread):
    """
    Renders one pixel per task and reports the sum of its samples.

    The world and camera are shared with the other workers and only read.
    """
    def __init__(self, worker_id: int, config: RenderConfig, world: Hittable,
                 camera: Camera, results: "queue.Queue"):
        super().__init__(name=f"render-worker-{worker_id}", daemon=True)
        self.worker_id = worker_id
        self.config = config
        self.world = world
        self.camera = camera
        self.results = results
        self.tasks: "queue.Queue[Optional[PixelTask]]" = queue.Queue()
        self._rng = random.Random() if config.seed is None else None
        self._horizon = Color(*config.sky_horizon)
        self._zenith = Color(*config.sky_zenith)

    def send(self, task: PixelTask):
        self.tasks.put(task)

    def stop(self):
        self.tasks.put(_STOP)

    def run(self):
        logger.debug("%s started", self.name)
        while True:
            task = self.tasks.get()
            if task is _STOP:
                break
            try:
                color = self.render_pixel(task)
            except BaseException as exc:
                self.results.put(WorkerFailure(self.worker_id, task, exc))
                break
            self.results.put(PixelResult(self.worker_id, task, color))
        logger.debug("%s stopped", self.name)

    def trace(self, ray: Ray, rng) -> Color:
        cfg = self.config
        return ray_color(ray, self.world, cfg.max_depth, rng,
                         t_min=cfg.t_min,
                         attenuation=cfg.diffuse_attenuation,
                         horizon=self._horizon,
                         zenith=self._zenith)

    def render_pixel(self, task: PixelTask) -> Color:
        """
        Sum of samples_per_pixel jittered samples over the pixel footprint,
        or a single sample when the task carries a ready ray.
        """
        cfg = self.config
        rng = self._rng if self._rng is not None else pixel_rng(cfg.seed, task.x, task.y)
        if task.ray is not None:
            return self.trace(task.ray, rng)

        last_column = cfg.image_width - 1
        last_row = cfg.image_height - 1
        row_from_bottom = last_row - task.y
        pixel_color = Color(0.0, 0.0, 0.0)
        for _ in range(cfg.samples_per_pixel):
            u = (task.x + rng.uniform(0.0, 1.0)) / last_column
            v = (row_from_bottom + rng.uniform(0.0, 1.0)) / last_row
            pixel_color = pixel_color + self.trace(self.camera.get_ray(u, v), rng)
        return pixel_color


class RenderScheduler:
    """
    Hands pixels to a pool of workers in row-major order and collects the
    results into a FrameBuffer.

    Usage:
        scheduler = RenderScheduler(config, build_scene(config.spheres))
        frame = scheduler.run()
        data = frame.to_bytes()
    """
    def __init__(self, config: RenderConfig, world: Hittable, camera: Camera = None):
        self.config = config.validate()
        self.world = world
        self.camera = camera if camera is not None else Camera.from_config(config)
        # (worker_id, x, y) for every assignment, in dispatch order.
        self.dispatch_log: List[Tuple[int, int, int]] = []

    def pixel_coordinates(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.config.image_height):
            for x in range(self.config.image_width):
                yield x, y

    def make_task(self, x: int, y: int) -> PixelTask:
        if not self.config.dispatch_rays:
            return PixelTask(x, y)
        u = x / (self.config.image_width - 1)
        v = (self.config.image_height - 1 - y) / (self.config.image_height - 1)
        return PixelTask(x, y, self.camera.get_ray(u, v))

    def run(self, progress: ProgressCallback = None) -> FrameBuffer:
        cfg = self.config
        frame = FrameBuffer(cfg.image_width, cfg.image_height,
                            cfg.effective_samples_per_pixel)
        results: "queue.Queue" = queue.Queue()
        workers = [RenderWorker(i, cfg, self.world, self.camera, results)
                   for i in range(cfg.num_workers)]
        cursor = self.pixel_coordinates()
        in_flight: Dict[int, PixelTask] = {}
        self.dispatch_log = []

        def dispatch(worker: RenderWorker) -> bool:
            coordinate = next(cursor, None)
            if coordinate is None:
                return False
            x, y = coordinate
            task = self.make_task(x, y)
            in_flight[worker.worker_id] = task
            self.dispatch_log.append((worker.worker_id, x, y))
            worker.send(task)
            if progress is not None and x == cfg.image_width - 1:
                progress(y + 1, cfg.image_height)
            return True

        for worker in workers:
            worker.start()
        try:
            for worker in workers:
                if not dispatch(worker):
                    break

            while in_flight:
                message = self._next_message(results, workers, in_flight)
                if isinstance(message, WorkerFailure):
                    logger.error("worker %d failed on pixel (%d, %d): %r",
                                 message.worker_id, message.task.x, message.task.y,
                                 message.error)
                    raise RenderError(
                        f"worker {message.worker_id} failed on pixel "
                        f"({message.task.x}, {message.task.y})"
                    ) from message.error

                task = in_flight.pop(message.worker_id, None)
                if task is None or task != message.task:
                    raise RenderError(
                        f"unexpected result from worker {message.worker_id} "
                        f"for pixel ({message.task.x}, {message.task.y})"
                    )
                frame.accumulate(task.x, task.y, message.color)
                dispatch(workers[message.worker_id])
        finally:
            for worker in workers:
                worker.stop()
            for worker in workers:
                worker.join()

        logger.debug("rendered %d pixels with %d workers", frame.filled, len(workers))
        return frame

    @staticmethod
    def _next_message(results: "queue.Queue", workers: List[RenderWorker],
                      in_flight: Dict[int, PixelTask]):
        """Blocks for the next result; a worker that died with a task in flight aborts."""
        while True:
            try:
                return results.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                pass
            for worker_id, task in in_flight.items():
                if not workers[worker_id].is_alive() and results.empty():
                    logger.error("worker %d died on pixel (%d, %d)", worker_id, task.x, task.y)
                    raise RenderError(
                        f"worker {worker_id} exited while rendering pixel ({task.x}, {task.y})"
                    )
