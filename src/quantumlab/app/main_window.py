"""
Main window: experiment tabs on top, control panel and canvas side by side,
event console docked at the bottom.
"""
from __future__ import annotations

import logging
from datetime import datetime

import pyqtgraph as pg
from PySide6.QtCore import Qt, QT_TRANSLATE_NOOP, Slot
from PySide6.QtWidgets import (
    QMainWindow, QSplitter, QListWidget, QListWidgetItem, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QDockWidget, QScrollArea, QFormLayout, QPlainTextEdit, QPushButton, QSlider,
    QGroupBox, QTabBar,
)

from quantumlab.app.application import VISIBLE_APP_NAME
from quantumlab.app.canvas import SimulationCanvas
from quantumlab.config import (
    BARRIER_HEIGHT, FEEDBACK_MESSAGE_MS, FIELD_INTENSITY, OBJECT_FREQUENCY, PARTICLE_COUNT,
    WAVE_SPEED, SliderRange,
)
from quantumlab.model.modes import ExperimentMode
from quantumlab.model.objects import QuantumObject
from quantumlab.model.simulation import Simulation

logger = logging.getLogger(__name__)

MODE_ORDER = [
    ExperimentMode.TELEPORTATION,
    ExperimentMode.INTERFERENCE,
    ExperimentMode.TUNNELING,
    ExperimentMode.SUPERPOSITION,
]

MODE_LABELS = {
    ExperimentMode.TELEPORTATION: QT_TRANSLATE_NOOP("Modes", "Teleport"),
    ExperimentMode.INTERFERENCE: QT_TRANSLATE_NOOP("Modes", "Interference"),
    ExperimentMode.TUNNELING: QT_TRANSLATE_NOOP("Modes", "Tunneling"),
    ExperimentMode.SUPERPOSITION: QT_TRANSLATE_NOOP("Modes", "Superposition"),
}

MODE_DESCRIPTIONS = {
    ExperimentMode.TELEPORTATION: QT_TRANSLATE_NOOP(
        "Modes", "Teleport quantum states between entangled objects. Click the canvas to add objects."),
    ExperimentMode.INTERFERENCE: QT_TRANSLATE_NOOP(
        "Modes", "Observe double-slit interference patterns and wave superposition."),
    ExperimentMode.TUNNELING: QT_TRANSLATE_NOOP(
        "Modes", "Demonstrate particles tunneling through energy barriers."),
    ExperimentMode.SUPERPOSITION: QT_TRANSLATE_NOOP(
        "Modes", "Visualize quantum objects existing in multiple states simultaneously."),
}


class Console(QPlainTextEdit):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setMaximumBlockCount(500)

    def _log(self, level: str, msg: str) -> None:
        self.appendPlainText(f"{datetime.now().strftime('%H:%M:%S')} [{level}] {msg}")

    def info(self, msg: str) -> None:
        self._log("info", msg)

    def warn(self, msg: str) -> None:
        self._log("warn", msg)


class RangeSlider(QWidget):
    """Horizontal QSlider working in the units of a `SliderRange`, with a value label."""

    def __init__(self, spec: SliderRange, value: float, fmt: str = "{:.1f}", parent: QWidget | None = None):
        super().__init__(parent)
        self.spec = spec
        self.fmt = fmt
        h = QHBoxLayout(self)
        h.setContentsMargins(0, 0, 0, 0)
        self.slider = QSlider(Qt.Orientation.Horizontal, self)
        self.slider.setRange(0, spec.steps())
        self.label = QLabel(self)
        self.label.setMinimumWidth(36)
        h.addWidget(self.slider, 1)
        h.addWidget(self.label)
        self.slider.valueChanged.connect(lambda _: self.label.setText(self.fmt.format(self.value())))
        self.set_value(value)

    def value(self) -> float:
        return self.spec.clamp(self.spec.minimum + self.slider.value() * self.spec.step)

    def set_value(self, value: float) -> None:
        pos = int(round((self.spec.clamp(value) - self.spec.minimum) / self.spec.step))
        self.slider.setValue(pos)
        self.label.setText(self.fmt.format(self.value()))


class MainWindow(QMainWindow):
    def __init__(self, simulation: Simulation):
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1300, 800)

        self.simulation = simulation
        self.settings = simulation.settings
        self.registry = simulation.registry
        self.modes = simulation.modes
        self._plotted_len = -1
        self._last_plotted: float | None = None

        # ---- Central: TabBar on top + splitter below ----
        central = QWidget(self)
        v = QVBoxLayout(central)
        v.setContentsMargins(0, 0, 0, 0)
        v.setSpacing(0)

        self.tabs = QTabBar(central)
        self.tabs.setExpanding(True)
        self.tabs.setShape(QTabBar.Shape.RoundedNorth)
        for mode in MODE_ORDER:
            self.tabs.addTab(self.tr(MODE_LABELS[mode]))
        v.addWidget(self.tabs, 0)

        split = QSplitter(Qt.Orientation.Horizontal, central)
        split.setChildrenCollapsible(False)
        v.addWidget(split, 1)

        scroll = QScrollArea(split)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._build_controls())
        scroll.setMinimumWidth(340)
        self.canvas = SimulationCanvas(simulation, split)
        split.addWidget(scroll)
        split.addWidget(self.canvas)
        split.setStretchFactor(0, 0)
        split.setStretchFactor(1, 1)

        self.setCentralWidget(central)

        # ---- Console dock ----
        self.console = Console(self)
        dock = QDockWidget(self.tr("Events"), self)
        dock.setObjectName("dock_console")
        dock.setWidget(self.console)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, dock)

        self.hud = QLabel(self)
        self.statusBar().addPermanentWidget(self.hud)

        # ---- Signals ----
        self.tabs.currentChanged.connect(self._on_tab_changed)
        self.modes.mode_changed.connect(self._on_mode_changed)
        self.modes.feedback.connect(self._on_feedback)
        self.registry.objects_changed.connect(self._refresh_objects)
        self.registry.selection_changed.connect(self._on_selection_changed)
        self.canvas.frame_advanced.connect(lambda *_: self._refresh_readouts())

        self.tabs.setCurrentIndex(MODE_ORDER.index(self.modes.mode))
        self._on_mode_changed(self.modes.mode)
        self._refresh_objects()
        self._on_selection_changed(self.registry.selected_id)
        self._refresh_readouts()
        self.console.info(self.tr("Simulation ready."))
        self.canvas.start()

    # ------------------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------------------

    def _build_controls(self) -> QWidget:
        panel = QWidget(self)
        layout = QVBoxLayout(panel)

        self.mode_title = QLabel(panel)
        self.mode_title.setStyleSheet("font-weight: bold; font-size: 16px;")
        self.mode_description = QLabel(panel)
        self.mode_description.setWordWrap(True)
        layout.addWidget(self.mode_title)
        layout.addWidget(self.mode_description)

        # Sliders
        box = QGroupBox(self.tr("Field"), panel)
        form = QFormLayout(box)
        self.field_slider = RangeSlider(FIELD_INTENSITY, self.settings.field_intensity)
        self.speed_slider = RangeSlider(WAVE_SPEED, self.settings.wave_speed)
        self.barrier_slider = RangeSlider(BARRIER_HEIGHT, self.settings.barrier_height, "{:.0f}")
        self.particle_slider = RangeSlider(PARTICLE_COUNT, self.settings.particle_count, "{:.0f}")
        self.barrier_label = QLabel(self.tr("Barrier height"))
        form.addRow(self.tr("Field intensity"), self.field_slider)
        form.addRow(self.tr("Wave speed"), self.speed_slider)
        form.addRow(self.barrier_label, self.barrier_slider)
        form.addRow(self.tr("Particle count"), self.particle_slider)
        layout.addWidget(box)

        self.field_slider.slider.valueChanged.connect(
            lambda _: self.settings.update(field_intensity=self.field_slider.value()))
        self.speed_slider.slider.valueChanged.connect(
            lambda _: self.settings.update(wave_speed=self.speed_slider.value()))
        self.barrier_slider.slider.valueChanged.connect(
            lambda _: self.settings.update(barrier_height=self.barrier_slider.value()))
        self.particle_slider.slider.valueChanged.connect(
            lambda _: self.settings.update(particle_count=self.particle_slider.value()))

        # Buttons
        self.run_button = QPushButton(self.tr("Run Experiment"), panel)
        self.run_button.clicked.connect(self.modes.run_experiment)
        layout.addWidget(self.run_button)

        row = QHBoxLayout()
        self.pause_button = QPushButton(panel)
        self.pause_button.clicked.connect(self._toggle_running)
        self.particles_button = QPushButton(self.tr("Particles"), panel)
        self.particles_button.setCheckable(True)
        self.particles_button.setChecked(self.settings.show_particles)
        self.particles_button.toggled.connect(lambda on: self.settings.update(show_particles=on))
        self.audio_button = QPushButton(self.tr("Audio"), panel)
        self.audio_button.setCheckable(True)
        self.audio_button.setChecked(self.settings.audio_enabled)
        self.audio_button.toggled.connect(lambda on: self.settings.update(audio_enabled=on))
        self.measure_button = QPushButton(self.tr("Measure"), panel)
        self.measure_button.setCheckable(True)
        self.measure_button.setChecked(self.settings.measurement_mode)
        self.measure_button.toggled.connect(self._toggle_measurement)
        for b in (self.pause_button, self.particles_button, self.audio_button, self.measure_button):
            row.addWidget(b)
        layout.addLayout(row)

        row = QHBoxLayout()
        add_button = QPushButton(self.tr("Add Object"), panel)
        add_button.clicked.connect(lambda: self.registry.add())
        reset_button = QPushButton(self.tr("Reset"), panel)
        reset_button.clicked.connect(self._reset)
        row.addWidget(add_button)
        row.addWidget(reset_button)
        layout.addLayout(row)

        # Objects
        box = QGroupBox(self.tr("Quantum Objects"), panel)
        ov = QVBoxLayout(box)
        self.object_list = QListWidget(box)
        self.object_list.currentItemChanged.connect(self._on_object_clicked)
        ov.addWidget(self.object_list)
        self.entangle_button = QPushButton(box)
        self.entangle_button.clicked.connect(self._toggle_selected_entanglement)
        self.frequency_slider = RangeSlider(OBJECT_FREQUENCY, OBJECT_FREQUENCY.default)
        self.frequency_slider.slider.valueChanged.connect(
            lambda _: self.registry.set_selected_frequency(self.frequency_slider.value()))
        fl = QFormLayout()
        fl.addRow(self.tr("Frequency (Hz)"), self.frequency_slider)
        ov.addWidget(self.entangle_button)
        ov.addLayout(fl)
        layout.addWidget(box)

        # Measurements
        self.measure_box = QGroupBox(self.tr("Live Measurements"), panel)
        mv = QVBoxLayout(self.measure_box)
        self.plot = pg.PlotWidget(self.measure_box)
        self.plot.setMinimumHeight(140)
        self.plot.setLabel("bottom", "t")
        self.plot.setLabel("left", self.tr("value"))
        self.curve = self.plot.plot([], [], pen=pg.mkPen("#B794F6", width=2), symbol="o", symbolSize=5)
        mv.addWidget(self.plot)
        layout.addWidget(self.measure_box)

        self.readout = QLabel(panel)
        layout.addWidget(self.readout)
        layout.addStretch()
        return panel

    # ------------------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------------------

    @Slot(int)
    def _on_tab_changed(self, idx: int) -> None:
        self.modes.set_mode(MODE_ORDER[idx])

    def _on_mode_changed(self, mode: ExperimentMode) -> None:
        self.mode_title.setText(self.tr(MODE_LABELS[mode]))
        self.mode_description.setText(self.tr(MODE_DESCRIPTIONS[mode]))
        tunneling = mode is ExperimentMode.TUNNELING
        self.barrier_label.setVisible(tunneling)
        self.barrier_slider.setVisible(tunneling)
        self.console.info(self.tr("Mode: {}").format(mode.label))
        self.canvas.update()

    def _on_feedback(self, message: str) -> None:
        self.statusBar().showMessage(message, FEEDBACK_MESSAGE_MS)
        self.console.info(message)
        self.particles_button.setChecked(self.settings.show_particles)
        self.canvas.update()

    def _toggle_running(self) -> None:
        running = self.simulation.toggle_running()
        if running:
            self.canvas.start()
        else:
            self.canvas.stop()
        self._refresh_readouts()

    def _toggle_measurement(self, on: bool) -> None:
        self.simulation.set_measurement_mode(on)
        self._refresh_readouts()

    def _reset(self) -> None:
        self.simulation.reset()
        self.console.info(self.tr("Experiment reset."))
        self._refresh_readouts()
        self.canvas.update()

    def _on_object_clicked(self, current: QListWidgetItem | None, _previous=None) -> None:
        if current is not None:
            self.registry.select(current.data(Qt.ItemDataRole.UserRole))

    def _toggle_selected_entanglement(self) -> None:
        if self.registry.selected_id is not None:
            self.registry.toggle_entangled(self.registry.selected_id)

    def _on_selection_changed(self, object_id: str | None) -> None:
        obj = self.registry.get(object_id)
        self.entangle_button.setEnabled(obj is not None)
        self.frequency_slider.setEnabled(obj is not None)
        if obj is not None:
            self.frequency_slider.slider.blockSignals(True)
            self.frequency_slider.set_value(obj.frequency)
            self.frequency_slider.slider.blockSignals(False)
        self._refresh_objects()

    # ------------------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------------------

    @staticmethod
    def _object_row(index: int, obj: QuantumObject) -> str:
        badges = []
        if obj.is_entangled:
            badges.append("Entangled")
        if obj.is_teleporting:
            badges.append("Teleporting")
        badge_text = f"  [{', '.join(badges)}]" if badges else ""
        return (
            f"Object {index + 1}{badge_text}\n"
            f"Freq: {obj.frequency:.1f} Hz | Pos: ({round(obj.x)}, {round(obj.y)})"
        )

    def _refresh_objects(self) -> None:
        self.object_list.blockSignals(True)
        self.object_list.clear()
        for i, obj in enumerate(self.registry):
            item = QListWidgetItem(self._object_row(i, obj))
            item.setData(Qt.ItemDataRole.UserRole, obj.id)
            self.object_list.addItem(item)
            if obj.id == self.registry.selected_id:
                self.object_list.setCurrentItem(item)
        self.object_list.blockSignals(False)

        selected = self.registry.selected()
        self.entangle_button.setText(
            self.tr("Unlink") if selected is not None and selected.is_entangled else self.tr("Entangle"))
        self.canvas.update()

    def _refresh_readouts(self) -> None:
        sim = self.simulation
        self.pause_button.setText(self.tr("Pause") if sim.is_running else self.tr("Play"))
        self.measure_box.setVisible(self.settings.measurement_mode)
        self.readout.setText(
            self.tr("Interaction probability: {:.1f}%\nObjects: {}\nTime: {:.2f}s").format(
                sim.interaction_probability * 100, len(self.registry), sim.time)
        )
        self.hud.setText(
            f"{sim.modes.mode.label} Mode | t = {sim.time:.2f}s | "
            f"Objects: {len(self.registry)} | Field: {self.settings.field_intensity:.1f}"
        )

        entries = sim.recorder.entries()
        if len(entries) != self._plotted_len or (entries and entries[-1].timestamp != self._last_plotted):
            self.curve.setData([m.timestamp for m in entries], [m.value for m in entries])
            self._plotted_len = len(entries)
            self._last_plotted = entries[-1].timestamp if entries else None
