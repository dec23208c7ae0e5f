"""
Simulation Controller - drives the trainer at a steady tick rate.
"""
import threading
import time
from typing import Callable, List, Optional

from loguru import logger

from antipredator.config.config_manager import check_steps_per_tick


class SimulationController:
    """
    Runs the trainer on one worker thread and publishes a snapshot per tick.

    Only the worker touches the trainer while running. Reset, demo and
    speed requests are queued and applied between ticks, never mid-step.
    While paused the worker applies them at once and publishes a snapshot.
    """

    def __init__(self, trainer, target_fps=None):
        """
        Initialize controller.

        Args:
            trainer: QLearningTrainer instance
            target_fps: Ticks per second (defaults to the configured fps)
        """
        self.trainer = trainer
        self.worker_thread: Optional[threading.Thread] = None
        self.should_stop = threading.Event()
        self.is_paused = threading.Event()
        self.is_running = False

        self._lock = threading.Lock()
        self._reset_requested = False
        self._demo_requested = False
        self._pending_speed: Optional[int] = None

        self.listeners: List[Callable] = []
        self.last_error: Optional[BaseException] = None

        # Speed control
        self.set_fps(target_fps if target_fps is not None else trainer.settings.display.fps)

    def add_listener(self, callback: Callable):
        """Subscribe to snapshots; called once per tick with a SimulationSnapshot."""
        self.listeners.append(callback)

    def remove_listener(self, callback: Callable):
        if callback in self.listeners:
            self.listeners.remove(callback)

    def start(self):
        """Start the simulation in a separate thread."""
        if self.is_running:
            logger.info("Already running")
            return

        self.should_stop.clear()
        self.is_paused.clear()
        self.is_running = True

        self.worker_thread = threading.Thread(target=self._run, daemon=True)
        self.worker_thread.start()

        logger.info("Simulation started")

    def pause(self):
        """Pause the simulation."""
        if not self.is_running:
            return

        self.is_paused.set()
        logger.info("Simulation paused")

    def resume(self):
        """Resume the simulation."""
        if not self.is_running:
            return

        self.is_paused.clear()
        logger.info("Simulation resumed")

    def toggle_play(self):
        if not self.is_running:
            self.start()
        elif self.is_paused.is_set():
            self.resume()
        else:
            self.pause()

    def stop(self):
        """Stop the simulation."""
        if not self.is_running:
            return

        self.should_stop.set()
        logger.info("Stopping simulation...")

        if self.worker_thread and self.worker_thread.is_alive():
            self.worker_thread.join(timeout=5.0)
            if self.worker_thread.is_alive():
                logger.warning("Worker did not exit within 5s; still running")
                return

        self.is_running = False
        logger.info("Simulation stopped")

    def set_fps(self, fps):
        """
        Set tick rate (ticks per second).

        Args:
            fps: Target FPS (1-1000)
        """
        self.target_fps = max(1, min(1000, int(fps)))
        self.frame_delay = 1.0 / self.target_fps

    def set_speed(self, steps_per_tick: int):
        """
        Queue a new steps-per-tick value, applied before the next tick.

        Applied at once when the worker is not running.

        Raises:
            ConfigError: If outside [1, 50]
        """
        check_steps_per_tick(steps_per_tick)
        with self._lock:
            self._pending_speed = steps_per_tick
        self._apply_if_idle()

    def request_reset(self):
        """Forget all learning before the next tick."""
        with self._lock:
            self._reset_requested = True
        self._apply_if_idle()

    def request_demo(self):
        """Switch to pure exploitation before the next tick."""
        with self._lock:
            self._demo_requested = True
        self._apply_if_idle()

    def _apply_if_idle(self):
        if not self.is_running:
            self._apply_pending()

    def _apply_pending(self):
        if self._apply_requests():
            self._emit(self.trainer.get_snapshot())

    def _apply_requests(self) -> bool:
        """Apply queued requests; returns True if any were pending."""
        with self._lock:
            reset, demo, speed = self._reset_requested, self._demo_requested, self._pending_speed
            self._reset_requested = False
            self._demo_requested = False
            self._pending_speed = None

        if reset:
            self.trainer.reset()
        if speed is not None:
            self.trainer.set_speed(speed)
        if demo:
            self.trainer.demo_mode()
        return reset or demo or speed is not None

    def tick(self):
        """
        Run one tick synchronously: pending requests, a batch of steps, a snapshot.

        Returns:
            tuple: (SimulationSnapshot, metrics dict)
        """
        self._apply_requests()
        metrics = self.trainer.train_step()
        snapshot = self.trainer.get_snapshot()
        self._emit(snapshot)
        return snapshot, metrics

    def _run(self):
        """Main loop (runs in worker thread)."""
        try:
            while not self.should_stop.is_set() and not self.trainer.is_finished():
                if self.is_paused.is_set():
                    self._apply_pending()
                    time.sleep(0.1)
                    continue

                start_time = time.time()
                self.tick()

                # Frame rate limiting
                elapsed = time.time() - start_time
                if elapsed < self.frame_delay:
                    time.sleep(self.frame_delay - elapsed)

            self.is_running = False
            logger.info("Simulation finished after {} generations", self.trainer.current_generation)

        except Exception as e:
            self.is_running = False
            self.last_error = e
            logger.exception("Simulation error: {}", e)

    def _emit(self, snapshot):
        for callback in list(self.listeners):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Snapshot listener {} failed", callback)

    def get_current_metrics(self) -> dict:
        """
        Get current metrics from trainer.

        Returns:
            dict: Current metrics
        """
        return self.trainer.get_metrics()
