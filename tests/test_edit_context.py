"""Tests for FieldIdentity and EditContext."""

import pytest

from conftest import Person


def test_field_identity_compares_owner_by_identity():
    """Equal-valued owners are still different fields."""
    from pyqt_formsession.core import FieldIdentity

    a, b = Person(name="Ada"), Person(name="Ada")
    assert a == b
    assert FieldIdentity(a, "name") == FieldIdentity(a, "name")
    assert FieldIdentity(a, "name") != FieldIdentity(b, "name")
    assert FieldIdentity(a, "name") != FieldIdentity(a, "age")
    assert len({FieldIdentity(a, "name"), FieldIdentity(a, "name")}) == 1


def test_field_identity_rejects_bad_input():
    """A None owner or an empty field name is rejected."""
    from pyqt_formsession.core import FieldIdentity

    with pytest.raises(ValueError):
        FieldIdentity(None, "name")
    with pytest.raises(TypeError):
        FieldIdentity(Person(), "")


def test_field_changed_fans_out_in_registration_order(person):
    """Field-changed handlers run in the order they subscribed."""
    from pyqt_formsession.core import EditContext, EditContextEvent

    context = EditContext(person)
    calls = []
    context.subscribe(EditContextEvent.FIELD_CHANGED, lambda sender, args: calls.append(("first", args.field)))
    context.subscribe(EditContextEvent.FIELD_CHANGED, lambda sender, args: calls.append(("second", args.field)))

    field = context.field("name")
    context.notify_field_changed(field)

    assert calls == [("first", field), ("second", field)]


def test_duplicate_subscription_dispatches_once_per_add(person):
    """No implicit de-dup, no implicit duplication."""
    from pyqt_formsession.core import EditContext, EditContextEvent

    context = EditContext(person)
    calls = []

    def handler(sender, args):
        calls.append(sender)

    context.subscribe(EditContextEvent.VALIDATION_REQUESTED, handler)
    context.subscribe(EditContextEvent.VALIDATION_REQUESTED, handler)
    context.validate()
    assert calls == [context, context]

    context.unsubscribe(EditContextEvent.VALIDATION_REQUESTED, handler)
    calls.clear()
    context.validate()
    assert calls == [context]


def test_unsubscribe_missing_handler_is_noop(person):
    """Unsubscribing an unknown handler does nothing."""
    from pyqt_formsession.core import EditContext, EditContextEvent

    context = EditContext(person)
    context.unsubscribe(EditContextEvent.FIELD_CHANGED, lambda sender, args: None)
    assert context.get_subscribers(EditContextEvent.FIELD_CHANGED) == ()


def test_validate_raises_requested_then_state_changed(person):
    """validate() raises validation-requested before validation-state-changed."""
    from pyqt_formsession.core import EditContext, EditContextEvent

    context = EditContext(person)
    order = []
    context.subscribe(EditContextEvent.VALIDATION_STATE_CHANGED, lambda s, a: order.append("state"))
    context.subscribe(EditContextEvent.VALIDATION_REQUESTED, lambda s, a: order.append("requested"))

    assert context.validate() is True
    assert order == ["requested", "state"]


def test_validate_reports_messages_added_by_subscribers(person):
    """Messages added by validation handlers make validate() fail."""
    from pyqt_formsession.core import EditContext, EditContextEvent

    context = EditContext(person)

    def add_error(sender, args):
        sender.add_validation_messages(sender.field("age"), ["too old"])

    context.subscribe(EditContextEvent.VALIDATION_REQUESTED, add_error)

    assert context.validate() is False
    assert context.get_validation_messages(context.field("age")) == ["too old"]
    assert context.get_validation_messages() == ["too old"]

    context.clear_validation_messages(context.field("age"))
    assert context.get_validation_messages() == []


def test_is_modified_compares_against_initial_snapshot(person):
    """Only reported fields whose value differs from the snapshot count as modified."""
    from pyqt_formsession.core import EditContext

    context = EditContext(person)
    assert context.is_modified() is False

    person.name = "Grace"
    # Untracked until reported
    assert context.is_modified() is False

    context.notify_field_changed(context.field("name"))
    assert context.is_modified() is True
    assert context.is_modified(context.field("name")) is True
    assert context.is_modified(context.field("age")) is False

    person.name = "Ada"
    assert context.is_modified() is False


def test_is_modified_for_nested_owner(person):
    """Reported edits on nested owners count until marked unmodified."""
    from pyqt_formsession.core import EditContext, FieldIdentity

    context = EditContext(person)
    person.address.city = "Lyon"
    context.notify_field_changed(FieldIdentity(person.address, "city"))
    assert context.is_modified() is True

    context.mark_as_unmodified()
    assert context.is_modified() is False


def test_mark_single_field_unmodified(person):
    """Marking one field unmodified takes its current value as the new baseline."""
    from pyqt_formsession.core import EditContext

    context = EditContext(person)
    person.age = 40
    context.notify_field_changed(context.field("age"))
    context.mark_as_unmodified(context.field("age"))
    assert context.is_modified() is False

    # New baseline is the value at the time it was marked
    person.age = 36
    context.notify_field_changed(context.field("age"))
    assert context.is_modified() is True


def test_edit_context_requires_model():
    """An edit context cannot wrap None."""
    from pyqt_formsession.core import EditContext

    with pytest.raises(ValueError):
        EditContext(None)
