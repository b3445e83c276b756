"""
Scan Components

Three component-marked classes and one plain class
"""

from beanjection import component, repository, service


@component
class UserDao:
    """Plain component"""

    def find(self, user_id):
        return {"id": user_id}


@service("accountService")
class AccountServiceImpl:
    """Service stereotype with an explicit bean name"""
    pass


@repository
class OrderRepository:
    """Repository stereotype"""
    pass


class PlainHelper:
    """Not a component: must never be registered by a scan"""
    pass
