"""Tests for the threaded render scheduler."""

import threading

import pytest

from tinytracer.core.vector import Vector3
from tinytracer.geometry.hittable import Hittable
from tinytracer.renderer.config import RenderConfig
from tinytracer.renderer.scene import build_scene
from tinytracer.renderer import scheduler as scheduler_module
from tinytracer.renderer.scheduler import (
    PixelTask,
    RenderError,
    RenderScheduler,
    RenderWorker,
)
from tinytracer.renderer.shading import sky_color


class ExplodingWorld(Hittable):
    def hit(self, ray, t_min, t_max):
        raise RuntimeError("boom")


class ExitingWorld(Hittable):
    def hit(self, ray, t_min, t_max):
        raise SystemExit(3)


class InFlightCheckingWorld(Hittable):
    """Records a violation if a worker has another task queued while rendering."""

    def __init__(self, world):
        self.world = world
        self.violations = []

    def hit(self, ray, t_min, t_max):
        thread = threading.current_thread()
        if isinstance(thread, RenderWorker) and not thread.tasks.empty():
            self.violations.append(thread.name)
        return self.world.hit(ray, t_min, t_max)


def live_workers():
    return [t for t in threading.enumerate() if isinstance(t, RenderWorker)]


class TestDispatch:
    def test_every_pixel_dispatched_exactly_once(self, small_config, world):
        scheduler = RenderScheduler(small_config, world)
        frame = scheduler.run()

        coords = [(x, y) for _, x, y in scheduler.dispatch_log]
        expected = {(x, y) for y in range(small_config.image_height)
                    for x in range(small_config.image_width)}
        assert len(coords) == small_config.pixel_count == 32
        assert set(coords) == expected
        assert frame.is_complete

    def test_cursor_is_row_major(self, small_config, world):
        scheduler = RenderScheduler(small_config, world)
        scheduler.run()
        coords = [(x, y) for _, x, y in scheduler.dispatch_log]
        assert coords == list(scheduler.pixel_coordinates())

    def test_all_workers_take_part(self, small_config, world):
        scheduler = RenderScheduler(small_config, world)
        scheduler.run()
        first_round = [worker_id for worker_id, _, _ in scheduler.dispatch_log[:3]]
        assert first_round == [0, 1, 2]

    def test_more_workers_than_pixels(self, world):
        config = RenderConfig(image_width=2, aspect_ratio=1.0, samples_per_pixel=1,
                              max_depth=2, num_workers=8, seed=1)
        scheduler = RenderScheduler(config, world)
        frame = scheduler.run()
        assert frame.is_complete
        assert len(scheduler.dispatch_log) == 4
        assert {worker_id for worker_id, _, _ in scheduler.dispatch_log} <= {0, 1, 2, 3}

    def test_one_task_in_flight_per_worker(self, small_config, world):
        checking = InFlightCheckingWorld(world)
        RenderScheduler(small_config, checking).run()
        assert checking.violations == []

    def test_progress_reports_rows(self, small_config, world):
        calls = []
        RenderScheduler(small_config, world).run(progress=lambda done, total: calls.append((done, total)))
        assert calls == [(row, 4) for row in range(1, 5)]

    def test_workers_are_stopped(self, small_config, world):
        RenderScheduler(small_config, world).run()
        assert live_workers() == []

    def test_invalid_config_rejected(self, world):
        with pytest.raises(ValueError):
            RenderScheduler(RenderConfig(num_workers=0), world)


class TestDeterminism:
    def test_seeded_render_independent_of_worker_count(self, small_config, world):
        one = RenderScheduler(small_config.with_overrides(num_workers=1), world).run()
        many = RenderScheduler(small_config.with_overrides(num_workers=5), world).run()
        assert one.to_bytes() == many.to_bytes()
        assert (one.accumulation_buffer == many.accumulation_buffer).all()

    def test_different_seeds_differ(self, small_config, world):
        a = RenderScheduler(small_config.with_overrides(seed=1), world).run()
        b = RenderScheduler(small_config.with_overrides(seed=2), world).run()
        assert (a.accumulation_buffer != b.accumulation_buffer).any()


class TestFailure:
    def test_worker_exception_aborts_render(self, small_config):
        scheduler = RenderScheduler(small_config, ExplodingWorld())
        with pytest.raises(RenderError) as excinfo:
            scheduler.run()
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert str(excinfo.value.__cause__) == "boom"
        assert live_workers() == []

    def test_worker_base_exception_aborts_render(self, small_config):
        scheduler = RenderScheduler(small_config.with_overrides(num_workers=1), ExitingWorld())
        with pytest.raises(RenderError) as excinfo:
            scheduler.run()
        assert isinstance(excinfo.value.__cause__, SystemExit)
        assert live_workers() == []

    def test_worker_dying_silently_aborts_render(self, small_config, monkeypatch):
        def run_one_task_then_exit(worker):
            worker.tasks.get()

        monkeypatch.setattr(scheduler_module, "_POLL_INTERVAL", 0.01)
        monkeypatch.setattr(RenderWorker, "run", run_one_task_then_exit)
        scheduler = RenderScheduler(small_config.with_overrides(num_workers=1), build_scene())
        with pytest.raises(RenderError, match="exited while rendering pixel \\(0, 0\\)"):
            scheduler.run()
        assert live_workers() == []


class TestConcreteScenes:
    """Single un-jittered ray per pixel against one sphere at (0, 0, -1), r = 0.5."""

    def _config(self, width):
        return RenderConfig(image_width=width, aspect_ratio=1.0, samples_per_pixel=1,
                            max_depth=2, num_workers=2, seed=3, dispatch_rays=True,
                            spheres=(((0.0, 0.0, -1.0), 0.5),))

    def test_dispatch_rays_tasks_carry_rays(self):
        config = self._config(3)
        scheduler = RenderScheduler(config, build_scene(config.spheres))
        task = scheduler.make_task(1, 1)
        assert isinstance(task, PixelTask)
        assert tuple(task.ray.direction) == pytest.approx((0.0, 0.0, -1.0))
        assert scheduler.make_task(0, 0).ray.direction.y == pytest.approx(1.0)

    def test_three_by_three(self):
        config = self._config(3)
        frame = RenderScheduler(config, build_scene(config.spheres)).run()
        buf = frame.accumulation_buffer
        assert frame.samples_per_pixel == 1

        # Center pixel hits the sphere and its bounce escapes to the sky.
        assert buf[1, 1, 2] == pytest.approx(0.5)
        assert 0.25 - 1e-12 <= buf[1, 1, 0] <= 0.5 + 1e-12

        # Every other ray misses and sees the sky along its own direction.
        for y in range(3):
            for x in range(3):
                if (x, y) == (1, 1):
                    continue
                direction = Vector3(x - 1.0, 1.0 - y, -1.0)
                assert tuple(buf[y, x]) == pytest.approx(tuple(sky_color(direction)))

    def test_two_by_two_corner_rays_miss(self):
        config = self._config(2)
        frame = RenderScheduler(config, build_scene(config.spheres)).run()
        buf = frame.accumulation_buffer
        for y in range(2):
            for x in range(2):
                direction = Vector3(2.0 * x - 1.0, 1.0 - 2.0 * y, -1.0)
                assert tuple(buf[y, x]) == pytest.approx(tuple(sky_color(direction)))
