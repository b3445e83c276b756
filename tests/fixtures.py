"""
Test Fixtures

Common test classes used across test modules
"""

from beanjection import FactoryBean, bean, configuration, lazy, primary, scope


class Database:
    """Test database class"""

    def __init__(self):
        self.name = "TestDB"


class CacheService:
    """Test cache service"""

    def __init__(self):
        self.cache = {}


class CounterService:
    """Service with mutable state for testing singleton behavior"""

    def __init__(self):
        self.counter = 0

    def increment(self):
        self.counter += 1
        return self.counter


class User:
    """Bean produced by factory methods"""

    def __init__(self, name: str = "anonymous"):
        self.name = name


class Bar:
    """Bean produced by Foo.bar()"""

    def __init__(self, owner):
        self.owner = owner


class Foo:
    """Factory bean with an instance factory method"""

    def __init__(self):
        self.created_bars = 0

    def bar(self) -> Bar:
        self.created_bars += 1
        return Bar(self)


class UserFactory:
    """Holder of a static and a class factory method"""

    @staticmethod
    def create_user() -> User:
        return User("static")

    @classmethod
    def create_named_user(cls, name) -> User:
        return User(name)


class Connection:
    """Bean with init and destroy hooks recording calls in a shared log"""

    def __init__(self, log=None):
        self.log = log if log is not None else []
        self.opened = False
        self.closed = False

    def open(self):
        self.opened = True
        self.log.append(("open", id(self)))

    def shutdown(self):
        self.closed = True
        self.log.append(("shutdown", id(self)))


class NeedsArguments:
    """Class without a default constructor"""

    def __init__(self, host, port):
        self.host = host
        self.port = port


class FailingService:
    """Constructor always fails"""

    def __init__(self):
        raise RuntimeError("boom")


@configuration
class MyConfig:
    """Configuration class with an instance and a static bean method"""

    @bean("userName1")
    def user1(self) -> User:
        return User("userName1")

    @bean("userName2")
    @staticmethod
    def user2() -> User:
        return User("userName2")


@configuration
class ScopedConfig:
    """Configuration class using method-level markers"""

    @bean
    @scope("prototype")
    def prototype_user(self) -> User:
        return User("prototype")

    @bean
    @lazy
    def lazy_user(self) -> User:
        return User("lazy")

    @bean
    @primary
    def main_user(self) -> User:
        return User("main")


class Clock:
    """Product of ClockFactory"""

    def __init__(self, zone: str = "UTC"):
        self.zone = zone


class ClockFactory(FactoryBean):
    """FactoryBean exposing a Clock under its own name"""

    def __init__(self):
        self.created = 0

    def get_object(self):
        self.created += 1
        return Clock()

    def get_object_type(self):
        return Clock


class PrototypeClockFactory(ClockFactory):
    """FactoryBean handing out a new Clock on every lookup"""

    def is_singleton(self):
        return False


class FailingClockFactory(FactoryBean):
    """FactoryBean whose product cannot be created"""

    def get_object(self):
        raise RuntimeError("clock unavailable")
