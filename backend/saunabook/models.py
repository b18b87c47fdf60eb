from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Optional

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql.sqltypes import BigInteger, Boolean, Date, DateTime, Integer, String, Text


# SQLite only autoincrements INTEGER PRIMARY KEY
_ID = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


class ReservationStatus(StrEnum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Club(Base):
    __tablename__ = "clubs"

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="Europe/Helsinki")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    islands: Mapped[list["Island"]] = relationship(back_populates="club")
    boats: Mapped[list["Boat"]] = relationship(back_populates="club")


class Island(Base):
    __tablename__ = "islands"
    __table_args__ = (Index("idx_islands_club", "club_id"),)

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    club: Mapped["Club"] = relationship(back_populates="islands")
    saunas: Mapped[list["Sauna"]] = relationship(back_populates="island")


class Sauna(Base):
    __tablename__ = "saunas"
    __table_args__ = (
        CheckConstraint("heating_time_hours >= 0", name="chk_saunas_heating"),
        Index("idx_saunas_island", "island_id"),
    )

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    island_id: Mapped[int] = mapped_column(ForeignKey("islands.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    heating_time_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    auto_club_sauna_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    island: Mapped["Island"] = relationship(back_populates="saunas")
    reservations: Mapped[list["Reservation"]] = relationship(back_populates="sauna")
    shared_reservations: Mapped[list["SharedReservation"]] = relationship(back_populates="sauna")


class Boat(Base):
    __tablename__ = "boats"
    __table_args__ = (
        UniqueConstraint("club_id", "membership_number", name="uq_boats_membership"),
        Index("idx_boats_club", "club_id"),
    )

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    membership_number: Mapped[str] = mapped_column(String(50), nullable=False)
    captain_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    club: Mapped["Club"] = relationship(back_populates="boats")


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="chk_res_time"),
        CheckConstraint("adults >= 1", name="chk_res_adults"),
        CheckConstraint("kids >= 0", name="chk_res_kids"),
        Index("idx_res_sauna_start", "sauna_id", "start_time"),
        Index("idx_res_boat", "boat_id"),
    )

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    sauna_id: Mapped[int] = mapped_column(ForeignKey("saunas.id"), nullable=False)
    boat_id: Mapped[int] = mapped_column(ForeignKey("boats.id"), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    adults: Mapped[int] = mapped_column(Integer, nullable=False)
    kids: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(
            ReservationStatus,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            native_enum=False,
        ),
        nullable=False,
        default=ReservationStatus.ACTIVE,
    )
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=False), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    sauna: Mapped["Sauna"] = relationship(back_populates="reservations")
    boat: Mapped["Boat"] = relationship()


class SharedReservation(Base):
    __tablename__ = "shared_reservations"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="chk_shared_time"),
        Index("idx_shared_sauna_day", "sauna_id", "day"),
    )

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    sauna_id: Mapped[int] = mapped_column(ForeignKey("saunas.id"), nullable=False)
    day: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_club_sauna: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    sauna: Mapped["Sauna"] = relationship(back_populates="shared_reservations")
    participants: Mapped[list["SharedReservationParticipant"]] = relationship(back_populates="shared_reservation")


class SharedReservationParticipant(Base):
    __tablename__ = "shared_reservation_participants"
    __table_args__ = (
        CheckConstraint("adults >= 1", name="chk_part_adults"),
        CheckConstraint("kids >= 0", name="chk_part_kids"),
        UniqueConstraint("shared_reservation_id", "boat_id", name="uq_part_shared_boat"),
        Index("idx_part_boat", "boat_id"),
    )

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    shared_reservation_id: Mapped[int] = mapped_column(ForeignKey("shared_reservations.id"), nullable=False)
    boat_id: Mapped[int] = mapped_column(ForeignKey("boats.id"), nullable=False)
    adults: Mapped[int] = mapped_column(Integer, nullable=False)
    kids: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    shared_reservation: Mapped["SharedReservation"] = relationship(back_populates="participants")
    boat: Mapped["Boat"] = relationship()
