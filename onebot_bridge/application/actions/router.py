"""Action names understood by the bridge."""


class ActionName:
    GetVersionInfo = "get_version_info"
    CanSendImage = "can_send_image"
    CanSendRecord = "can_send_record"
