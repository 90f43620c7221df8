"""
Database router: the offline queue app lives in the local 'offline' database,
everything else in the primary store.
"""


class OfflineQueueRouter:
    route_app_labels = {'offline'}
    offline_alias = 'offline'

    def db_for_read(self, model, **hints):
        if model._meta.app_label in self.route_app_labels:
            return self.offline_alias
        return None

    def db_for_write(self, model, **hints):
        if model._meta.app_label in self.route_app_labels:
            return self.offline_alias
        return None

    def allow_relation(self, obj1, obj2, **hints):
        labels = {obj1._meta.app_label, obj2._meta.app_label}
        if labels & self.route_app_labels and labels - self.route_app_labels:
            return False
        return None

    def allow_migrate(self, db, app_label, model_name=None, **hints):
        if app_label in self.route_app_labels:
            return db == self.offline_alias
        if db == self.offline_alias:
            return False
        return None
