class UnitBridgeError(Exception):
    pass


class UnitBridgeStatusError(UnitBridgeError):
    """
    non-2xx response from the unit operations api
    """
    def __init__(self, status_code: int, message: str):
        super().__init__(f'HTTP {status_code}: {message}')
        self.status_code = status_code
        self.message = message
