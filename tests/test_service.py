from unitdeck.service import Service
from unitdeck.service_property import ServiceProperty
from unitdeck.service_state import ServiceState

STATE = ServiceState("loaded", "active", "running", "enabled")


def test_formatted_name_strips_service_suffix():
    service = Service("nginx.service", "web server", STATE)
    assert service.formatted_name() == "nginx"


def test_formatted_name_keeps_other_names():
    service = Service("nginx.socket", "socket", STATE)
    assert service.formatted_name() == "nginx.socket"


def test_formatted_name_strips_only_trailing_suffix():
    service = Service("a.service.b.service", "", STATE)
    assert service.formatted_name() == "a.service.b"


def test_properties_start_empty_and_can_be_updated():
    service = Service("cron.service", "cron", STATE)
    assert service.properties is None
    props = ServiceProperty(main_pid=42, user="root")
    service.update_properties(props)
    assert service.properties is props
    assert service.properties.main_pid == 42


def test_fields_are_kept():
    service = Service("cron.service", "Regular background program", STATE)
    assert service.name == "cron.service"
    assert service.description == "Regular background program"
    assert service.state is STATE