from clients.youdao import YoudaoClient, sign_request

__all__ = ["YoudaoClient", "sign_request"]
