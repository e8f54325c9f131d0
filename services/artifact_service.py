# ============================================================================
# ARTIFACT LIFECYCLE SERVICE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Service - Write, pack, deliver, clean up
# PURPOSE: Turn the assembled document into an archive and dispose of temp files
# CREATED: 19 OCT 2026
# ============================================================================
"""
Artifact Lifecycle Service

Given the assembled document text:

    <TEMP_DIR>/sql/<name>.sql   written
    <TEMP_DIR>/<name>.zip       packed from <TEMP_DIR>/sql
    mail                        sent when email options are configured
    cleanup                     sql file and sql dir always removed;
                                archive and TEMP_DIR removed unless
                                PRESERVE_GENERATED_ZIP

Temp directory or file creation failures are fatal (ArtifactIOError).
Delivery failures are logged and the archive is kept. Cleanup failures
are logged only.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from core.config.options import ExportOptions
from core.errors import ArtifactIOError, DeliveryError
from core.logging import ComponentType, get_logger
from infrastructure.archive import ZipArchiver
from infrastructure.mailer import MailMessage, SmtpMailer

SQL_SUBDIR = "sql"


class ArtifactLifecycle:
    """
    Artifact lifecycle for one export run.

    Args:
        options: Export options (temp dir, file name, email, preserve flag)
        archiver: Packaging collaborator (ZipArchiver by default)
        mailer: Delivery collaborator (SmtpMailer when email is configured)
        logger: Observer for lifecycle events
    """

    def __init__(
        self,
        options: ExportOptions,
        archiver: Optional[ZipArchiver] = None,
        mailer: Optional[SmtpMailer] = None,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ):
        self.options = options
        self.archiver = archiver or ZipArchiver()
        self.mailer = mailer
        if self.mailer is None and options.email is not None:
            self.mailer = SmtpMailer(options.email)
        self.logger = logger or get_logger(__name__, ComponentType.SERVICE)

        self.temp_dir = Path(options.temp_dir)
        self.sql_dir = self.temp_dir / SQL_SUBDIR
        self.sql_file_name: Optional[str] = None
        self.archive_path: Optional[Path] = None

    @property
    def sql_file(self) -> Optional[Path]:
        if self.sql_file_name is None:
            return None
        return self.sql_dir / self.sql_file_name

    def publish(self, document_text: str, now: Optional[datetime] = None) -> Path:
        """
        Write, pack, deliver and clean up.

        Args:
            document_text: Assembled export script
            now: Timestamp used in the generated file name

        Returns:
            Path of the archive produced. It is already removed by cleanup
            when PRESERVE_GENERATED_ZIP is off and delivery did not fail.

        Raises:
            ArtifactIOError: Temp directory, SQL file or archive not writable
        """
        self.sql_file_name = self.options.sql_filename(now)
        self.archive_path = self.temp_dir / f"{Path(self.sql_file_name).stem}.zip"

        self._write_sql(document_text)

        try:
            self.archiver.pack(self.sql_dir, self.archive_path)
        except ArtifactIOError:
            self.clear_temp_files(preserve_archive=False)
            raise
        self.logger.info(f"Archive created: {self.archive_path}")

        preserve = self.options.preserve_generated_zip
        if self.mailer is not None and not self._deliver():
            preserve = True

        self.clear_temp_files(preserve)
        return self.archive_path

    def _write_sql(self, document_text: str) -> None:
        try:
            self.sql_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactIOError(
                f"Cannot create temp directory {self.sql_dir}: {e}",
                operation="create temp dir",
                object_name=str(self.sql_dir),
            ) from e

        try:
            self.sql_file.write_text(document_text, encoding="utf-8")
        except OSError as e:
            raise ArtifactIOError(
                f"Cannot write {self.sql_file}: {e}",
                operation="write sql file",
                object_name=str(self.sql_file),
            ) from e
        self.logger.debug(f"SQL written to {self.sql_file} ({len(document_text)} chars)")

    def _deliver(self) -> bool:
        email = self.options.email
        base_name = Path(self.sql_file_name).stem
        database = self.options.database.database_name
        message = MailMessage(
            from_address=email.from_address,
            to_address=email.to_address,
            subject=email.subject or base_name.upper(),
            body=email.message or f"Please find attached database backup of {database}",
            attachments=[self.archive_path],
        )
        try:
            self.mailer.send(message)
        except DeliveryError as e:
            self.logger.error(f"Unable to send archive by mail, archive kept: {e}")
            return False
        self.logger.info(f"Archive sent to {email.to_address}")
        return True

    def clear_temp_files(self, preserve_archive: bool = False) -> None:
        """
        Remove temp files. Never raises.

        The SQL file and its directory always go; the archive and the temp
        root go unless ``preserve_archive``. The temp root is only removed
        when empty.
        """
        if self.sql_file is not None:
            self._remove(self.sql_file)
        self._remove(self.sql_dir, directory=True)

        if preserve_archive:
            return

        if self.archive_path is not None:
            self._remove(self.archive_path)
        self._remove(self.temp_dir, directory=True)

    def _remove(self, path: Path, directory: bool = False) -> None:
        if not path.exists():
            self.logger.debug(f"{path.resolve()} does not exist while clearing temp files")
            return
        try:
            if directory:
                path.rmdir()
            else:
                path.unlink()
        except OSError as e:
            self.logger.warning(f"Could not delete {path}: {e}")
            return
        self.logger.debug(f"{path.resolve()} deleted")


__all__ = ["ArtifactLifecycle", "SQL_SUBDIR"]
