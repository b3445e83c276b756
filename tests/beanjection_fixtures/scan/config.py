"""
Scan Config

Configuration class scanning its own package
"""

from beanjection import bean, component_scan, configuration


@configuration
@component_scan()
class ScanConfig:
    """Declaring class lives in the scanned package"""

    @bean
    def greeting(self) -> str:
        return "hello"
