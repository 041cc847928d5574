"""Tests for the PyQt6 field editors and session bridge."""

from dataclasses import dataclass

import pytest

from conftest import Person


@dataclass
class Settings:
    enabled: bool = False
    ratio: float = 0.5


def _collect(signal):
    received = []
    signal.connect(lambda *args: received.append(args))
    return received


def test_field_editor_registry():
    """FIELD_EDITORS maps widget ids to editor classes."""
    from pyqt_formsession.widgets import FIELD_EDITORS, CheckBoxField, LineEditField

    assert set(FIELD_EDITORS) == {"line_edit", "spin_box", "double_spin_box", "check_box"}
    assert FIELD_EDITORS["line_edit"] is LineEditField
    assert FIELD_EDITORS["check_box"] is CheckBoxField


def test_line_edit_registers_and_shows_model_value(qapp, person):
    """A line edit shows the model value and registers as item and control."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import LineEditField

    session = FormSession(person)
    editor = LineEditField(session, "name")

    assert editor.text() == "Ada"
    assert session.form_items == (editor,)
    assert session.controls == (editor,)
    assert editor.get_field_identity() == session.edit_context.field("name")


def test_user_edit_writes_model_programmatic_update_does_not(qapp, person):
    """Only user edits write the model."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import LineEditField

    session = FormSession(person)
    editor = LineEditField(session, "name")

    editor.setText("Programmatic")
    assert person.name == "Ada"
    assert session.is_modified is False

    editor.textEdited.emit("Grace")
    assert person.name == "Grace"
    assert session.is_modified is True


def test_spin_box_writes_model(qapp, person):
    """Spin box value changes write the model and are tracked."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import SpinBoxField

    session = FormSession(person)
    editor = SpinBoxField(session, "age", minimum=0, maximum=200)
    assert editor.value() == 36

    editor.setValue(40)
    assert person.age == 40
    assert session.edit_context.is_modified(session.edit_context.field("age")) is True


def test_check_box_and_double_spin_box(qapp):
    """Check box and double spin box editors write their fields."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import CheckBoxField, DoubleSpinBoxField

    settings = Settings()
    session = FormSession(settings)
    enabled = CheckBoxField(session, "enabled", label="Enabled")
    ratio = DoubleSpinBoxField(session, "ratio", minimum=0.0, maximum=1.0, decimals=2)

    assert enabled.text() == "Enabled"
    assert enabled.isChecked() is False
    assert ratio.value() == pytest.approx(0.5)

    enabled.setChecked(True)
    ratio.setValue(0.25)
    assert settings.enabled is True
    assert settings.ratio == pytest.approx(0.25)


def test_reset_restores_widgets_without_echo(qapp, person):
    """Reset restores model and widgets without reporting edits."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import LineEditField, SpinBoxField

    session = FormSession(person)
    name = LineEditField(session, "name")
    age = SpinBoxField(session, "age", minimum=0, maximum=200)
    name.textEdited.emit("Grace")
    age.setValue(99)

    session.reset()

    assert (person.name, person.age) == ("Ada", 36)
    assert (name.text(), age.value()) == ("Ada", 36)
    assert session.is_modified is False


def test_rule_errors_render_as_tooltip_and_property(qapp):
    """Rule errors show as tooltip and the invalid property."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.protocols import FormSessionConfig, FormValidateMode
    from pyqt_formsession.validation import FormValidationRule
    from pyqt_formsession.widgets import LineEditField

    session = FormSession(Person(name="Ada"), FormSessionConfig(validate_mode=FormValidateMode.RULES))
    editor = LineEditField(session, "name", [FormValidationRule(required=True)], label="Name")

    editor.textEdited.emit("")
    assert editor.toolTip() == "Name is required"
    assert editor.property("invalid") is True

    editor.textEdited.emit("Ada")
    assert editor.toolTip() == ""
    assert editor.property("invalid") is False


def test_annotation_errors_render_on_widget(qapp):
    """Annotation errors show on the editor and clear when fixed."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import SpinBoxField

    session = FormSession(Person(name="Ada"))
    editor = SpinBoxField(session, "age", minimum=0, maximum=500)

    editor.setValue(300)
    assert editor.property("invalid") is True
    assert editor.toolTip()

    assert session.validate() is False
    editor.setValue(30)
    assert session.validate() is True
    assert editor.property("invalid") is False


def test_detach_deregisters_editor(qapp, person):
    """detach() removes the editor from both registries."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import LineEditField

    session = FormSession(person)
    editor = LineEditField(session, "name")
    editor.detach()

    assert session.form_items == ()
    assert session.controls == ()


def test_block_signals_restores_previous_state(qapp):
    """block_signals restores each widget's own blocked state."""
    from PyQt6.QtWidgets import QLineEdit

    from pyqt_formsession.services import SignalService

    free, blocked = QLineEdit(), QLineEdit()
    blocked.blockSignals(True)

    with SignalService.block_signals(free, blocked, None):
        assert free.signalsBlocked() and blocked.signalsBlocked()

    assert free.signalsBlocked() is False
    assert blocked.signalsBlocked() is True


def test_update_widget_value_rejects_unknown_widget(qapp):
    """Unknown widgets need an explicit setter."""
    from PyQt6.QtWidgets import QLabel

    from pyqt_formsession.services import SignalService

    with pytest.raises(ValueError):
        SignalService.update_widget_value(QLabel(), "text")
    label = QLabel()
    SignalService.update_widget_value(label, "text", setter=lambda w, v: w.setText(v))
    assert label.text() == "text"


# ==================== BRIDGE ====================

def test_bridge_coalesces_state_changes(qapp, person):
    """Several rebuilds in one event-loop turn emit state_changed once."""
    from PyQt6.QtTest import QTest

    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import FormSessionBridge

    session = FormSession(person)
    bridge = FormSessionBridge(session)
    received = _collect(bridge.state_changed)

    session.validation_reset()
    session.model = Person(name="Grace")
    assert received == []

    QTest.qWait(20)
    assert len(received) == 1


def test_bridge_submit_emits_outcome(qapp):
    """Bridge submit emits finish_failed or finished."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import FormSessionBridge

    session = FormSession(Person(name=""))
    bridge = FormSessionBridge(session)
    finished = _collect(bridge.finished)
    failed = _collect(bridge.finish_failed)

    assert bridge.submit() is False
    assert failed == [(session.edit_context,)]
    assert finished == []

    session.model.name = "Ada"
    assert bridge.submit() is True
    assert finished == [(session.edit_context,)]


def test_bridge_detach_stops_forwarding(qapp, person):
    """A detached bridge no longer emits."""
    from pyqt_formsession.forms import FormSession
    from pyqt_formsession.widgets import FormSessionBridge

    session = FormSession(person)
    bridge = FormSessionBridge(session)
    finished = _collect(bridge.finished)
    bridge.detach()

    session.submit()
    assert finished == []
