"""Account Models"""
from ..common_imports import *


class AccountType(str, Enum):
    AUTO = "auto"
    EXISTING = "existing"
    GROUP = "group"
    GLOBAL = "global"


class GroupType(str, Enum):
    LOCAL = "LocalGroup"
    ACTIVE_DIRECTORY = "ActiveDirectoryGroup"
    AZURE_ACTIVE_DIRECTORY = "AzureActiveDirectoryGroup"


@dataclass
class AutoLogonAccount:
    """Windows creates and signs in a local kiosk account"""
    display_name: str = ""

    @property
    def account_type(self) -> AccountType:
        return AccountType.AUTO


@dataclass
class ExistingUserAccount:
    """Bind the profile to an existing local or domain account"""
    account_name: str = ""

    @property
    def account_type(self) -> AccountType:
        return AccountType.EXISTING


@dataclass
class UserGroupAccount:
    """Restricted user mode: every member of a group gets the profile"""
    group_name: str = ""
    group_type: GroupType = GroupType.LOCAL

    @property
    def account_type(self) -> AccountType:
        return AccountType.GROUP


@dataclass
class GlobalProfileAccount:
    """Restricted user mode: applies to all non-administrator accounts"""

    @property
    def account_type(self) -> AccountType:
        return AccountType.GLOBAL


Account = Union[AutoLogonAccount, ExistingUserAccount, UserGroupAccount, GlobalProfileAccount]

RESTRICTED_ONLY_ACCOUNTS = (AccountType.GROUP, AccountType.GLOBAL)


def default_account(account_type: AccountType) -> Account:
    """Empty account of the given type"""
    if account_type == AccountType.AUTO:
        return AutoLogonAccount()
    if account_type == AccountType.EXISTING:
        return ExistingUserAccount()
    if account_type == AccountType.GROUP:
        return UserGroupAccount()
    if account_type == AccountType.GLOBAL:
        return GlobalProfileAccount()
    raise TypeError(f"Unknown account type: {account_type!r}")


def account_to_dict(account: Account) -> Dict[str, Any]:
    data = asdict(account)
    if isinstance(account, UserGroupAccount):
        data['group_type'] = account.group_type.value
    data['type'] = account.account_type.value
    return data


def account_from_dict(data: Dict[str, Any]) -> Account:
    """Rebuild an account from its tagged dictionary form"""
    account_type = AccountType(data.get('type', AccountType.AUTO.value))
    if account_type == AccountType.AUTO:
        return AutoLogonAccount(display_name=data.get('display_name', ''))
    if account_type == AccountType.EXISTING:
        return ExistingUserAccount(account_name=data.get('account_name', ''))
    if account_type == AccountType.GROUP:
        return UserGroupAccount(
            group_name=data.get('group_name', ''),
            group_type=GroupType(data.get('group_type', GroupType.LOCAL.value)),
        )
    return GlobalProfileAccount()
