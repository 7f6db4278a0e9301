import logging
import os
import platform
import stat

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    import win32api
    import win32con
    import win32file
    import win32security


def restrict_to_owner(filepath: str) -> bool:
    """
    Make *filepath* readable and writable by its owner only.

    POSIX gets mode 0600. On Windows the DACL is replaced with a single
    protected entry for the current user.

    Returns:
        True if the permissions were applied
    """
    if platform.system() == "Windows":
        return _restrict_windows(filepath)
    os.chmod(filepath, stat.S_IRUSR | stat.S_IWUSR)  # 600
    return True


def _restrict_windows(filepath: str) -> bool:
    try:
        user_sid, _, _ = win32security.LookupAccountName(None, win32api.GetUserName())

        dacl = win32security.ACL()
        dacl.AddAccessAllowedAce(
            win32security.ACL_REVISION,
            win32con.GENERIC_READ | win32con.GENERIC_WRITE,
            user_sid
        )

        handle = win32file.CreateFile(
            filepath,
            win32con.WRITE_DAC,
            win32file.FILE_SHARE_READ | win32file.FILE_SHARE_WRITE | win32file.FILE_SHARE_DELETE,
            None,
            win32con.OPEN_EXISTING,
            win32con.FILE_ATTRIBUTE_NORMAL,
            None
        )
        try:
            # PROTECTED_ drops inherited ACEs from the parent directory
            win32security.SetSecurityInfo(
                handle,
                win32security.SE_FILE_OBJECT,
                win32security.DACL_SECURITY_INFORMATION | win32security.PROTECTED_DACL_SECURITY_INFORMATION,
                None,
                None,
                dacl,
                None
            )
        finally:
            win32file.CloseHandle(handle)
    except win32api.error as e:
        logger.error(f"Failed to set Windows file permissions for {filepath}: {e}")
        return False
    logger.info(f"Set owner-only permissions for {filepath} on Windows.")
    return True
