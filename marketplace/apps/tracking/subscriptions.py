from collections import defaultdict


class SubscriptionIndex:
    """
    Two-way map between orders and the users watching them.

    Not synchronised on its own; ``ConnectionRegistry`` owns the only
    instance and mutates it under its lock.
    """

    def __init__(self):
        self._by_order = defaultdict(set)
        self._by_user = defaultdict(set)

    def add(self, order_id, user_id):
        order_id, user_id = str(order_id), str(user_id)
        self._by_order[order_id].add(user_id)
        self._by_user[user_id].add(order_id)

    def remove(self, order_id, user_id) -> bool:
        order_id, user_id = str(order_id), str(user_id)
        watchers = self._by_order.get(order_id)
        if not watchers or user_id not in watchers:
            return False

        watchers.discard(user_id)
        if not watchers:
            del self._by_order[order_id]
        orders = self._by_user.get(user_id)
        if orders is not None:
            orders.discard(order_id)
            if not orders:
                del self._by_user[user_id]
        return True

    def remove_user(self, user_id):
        """Drop every subscription held by ``user_id`` and return the affected order ids."""
        user_id = str(user_id)
        orders = self._by_user.pop(user_id, set())
        for order_id in orders:
            watchers = self._by_order.get(order_id)
            if watchers is None:
                continue
            watchers.discard(user_id)
            if not watchers:
                del self._by_order[order_id]
        return orders

    def subscribers(self, order_id):
        return set(self._by_order.get(str(order_id), ()))

    def orders_for(self, user_id):
        return set(self._by_user.get(str(user_id), ()))

    def clear(self):
        self._by_order.clear()
        self._by_user.clear()

    def __len__(self):
        return sum(len(watchers) for watchers in self._by_order.values())
