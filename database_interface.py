from abc import ABC, abstractmethod

class DatabaseInterface(ABC):
    @abstractmethod
    def get_user(self, uid): pass
    @abstractmethod
    def get_users(self, uids): pass

    @abstractmethod
    def get_group(self, group_id): pass
    @abstractmethod
    def get_all_groups(self): pass

    @abstractmethod
    def get_expenses_by_group(self, group_id): pass
    @abstractmethod
    def get_expenses_since(self, start_ms): pass
    @abstractmethod
    def get_all_expenses(self): pass

    @abstractmethod
    def delete_group_cascade(self, group_id, expense_ids): pass
