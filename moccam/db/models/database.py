from typing import Optional
import datetime
import decimal

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, ForeignKeyConstraint, Index, Integer, Numeric, PrimaryKeyConstraint, SmallInteger, String, Text, UniqueConstraint, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = 'users'
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'employee', 'customer')", name='users_role_check'),
        PrimaryKeyConstraint('user_id', name='users_pkey'),
        UniqueConstraint('email', name='users_email_key'),
        UniqueConstraint('phone_number', name='users_phone_number_key'),
    )

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default='customer', server_default=text("'customer'"))
    phone_number: Mapped[Optional[str]] = mapped_column(String(20))
    date_of_birth: Mapped[Optional[datetime.date]] = mapped_column(Date)
    picture: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    leaderboard: Mapped[Optional['Leaderboard']] = relationship('Leaderboard', back_populates='user', uselist=False)


class Courses(Base):
    __tablename__ = 'courses'
    __table_args__ = (
        ForeignKeyConstraint(['created_by'], ['users.user_id'], ondelete='SET NULL', name='courses_created_by_fkey'),
        PrimaryKeyConstraint('course_id', name='courses_pkey'),
    )

    course_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    level: Mapped[Optional[str]] = mapped_column(String(50))
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    lessons: Mapped[list['Lessons']] = relationship('Lessons', back_populates='course')


class Lessons(Base):
    __tablename__ = 'lessons'
    __table_args__ = (
        ForeignKeyConstraint(['course_id'], ['courses.course_id'], name='lessons_course_id_fkey'),
        PrimaryKeyConstraint('lesson_id', name='lessons_pkey'),
        Index('idx_lessons_course', 'course_id'),
    )

    lesson_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(Integer, nullable=False)
    lesson_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    video_url: Mapped[Optional[str]] = mapped_column(Text)
    picture_url: Mapped[Optional[str]] = mapped_column(Text)
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    course: Mapped['Courses'] = relationship('Courses', back_populates='lessons')


class Resources(Base):
    __tablename__ = 'resources'
    __table_args__ = (
        ForeignKeyConstraint(['lesson_id'], ['lessons.lesson_id'], name='resources_lesson_id_fkey'),
        PrimaryKeyConstraint('resource_id', name='resources_pkey'),
    )

    resource_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lesson_id: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    resource_type: Mapped[Optional[str]] = mapped_column(String(50))
    url: Mapped[Optional[str]] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class Comments(Base):
    __tablename__ = 'comments'
    __table_args__ = (
        CheckConstraint('rate >= 1 AND rate <= 5', name='comments_rate_check'),
        ForeignKeyConstraint(['lesson_id'], ['lessons.lesson_id'], name='comments_lesson_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['users.user_id'], name='comments_user_id_fkey'),
        PrimaryKeyConstraint('comment_id', name='comments_pkey'),
    )

    comment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    lesson_id: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    rate: Mapped[Optional[int]] = mapped_column(SmallInteger)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class AIModels(Base):
    __tablename__ = 'ai_models'
    __table_args__ = (
        PrimaryKeyConstraint('model_id', name='ai_models_pkey'),
    )

    model_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    model_name: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[Optional[str]] = mapped_column(String(50))
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class HandMotions(Base):
    __tablename__ = 'hand_motions'
    __table_args__ = (
        ForeignKeyConstraint(['lesson_id'], ['lessons.lesson_id'], name='hand_motions_lesson_id_fkey'),
        ForeignKeyConstraint(['model_id'], ['ai_models.model_id'], name='hand_motions_model_id_fkey'),
        PrimaryKeyConstraint('motion_id', name='hand_motions_pkey'),
    )

    motion_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lesson_id: Mapped[int] = mapped_column(Integer, nullable=False)
    model_id: Mapped[int] = mapped_column(Integer, nullable=False)
    motion_data: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class Notifications(Base):
    __tablename__ = 'notifications'
    __table_args__ = (
        ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE', name='notifications_user_id_fkey'),
        PrimaryKeyConstraint('notification_id', name='notifications_pkey'),
        Index('idx_notifications_user', 'user_id', 'is_read'),
    )

    notification_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[Optional[int]] = mapped_column(Integer)
    type: Mapped[Optional[str]] = mapped_column(String(50), default='system')
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class Vouchers(Base):
    __tablename__ = 'vouchers'
    __table_args__ = (
        ForeignKeyConstraint(['created_by'], ['users.user_id'], ondelete='SET NULL', name='vouchers_created_by_fkey'),
        PrimaryKeyConstraint('voucher_id', name='vouchers_pkey'),
        UniqueConstraint('code', name='vouchers_code_key'),
    )

    voucher_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    discount_value: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    max_usage: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    used_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class SubscriptionPlans(Base):
    __tablename__ = 'subscription_plans'
    __table_args__ = (
        PrimaryKeyConstraint('plan_id', name='subscription_plans_pkey'),
    )

    plan_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plan_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    duration_in_days: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default='VND')
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class UserSubscriptions(Base):
    __tablename__ = 'user_subscriptions'
    __table_args__ = (
        ForeignKeyConstraint(['plan_id'], ['subscription_plans.plan_id'], name='user_subscriptions_plan_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['users.user_id'], name='user_subscriptions_user_id_fkey'),
        PrimaryKeyConstraint('user_subscription_id', name='user_subscriptions_pkey'),
        Index('idx_user_subscriptions_user_plan', 'user_id', 'plan_id'),
    )

    user_subscription_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    plan_id: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class Payments(Base):
    __tablename__ = 'payments'
    __table_args__ = (
        ForeignKeyConstraint(['plan_id'], ['subscription_plans.plan_id'], name='payments_plan_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['users.user_id'], name='payments_user_id_fkey'),
        ForeignKeyConstraint(['voucher_id'], ['vouchers.voucher_id'], name='payments_voucher_id_fkey'),
        PrimaryKeyConstraint('payment_id', name='payments_pkey'),
        UniqueConstraint('transaction_id', name='payments_transaction_id_key'),
    )

    payment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    plan_id: Mapped[int] = mapped_column(Integer, nullable=False)
    original_amount: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount_amount: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    final_amount: Mapped[decimal.Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='pending')
    transaction_id: Mapped[str] = mapped_column(String(64), nullable=False)
    voucher_id: Mapped[Optional[int]] = mapped_column(Integer)
    description: Mapped[Optional[str]] = mapped_column(Text)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), default='PayOS')
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
    updated_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)


class LessonProgress(Base):
    __tablename__ = 'lesson_progress'
    __table_args__ = (
        ForeignKeyConstraint(['lesson_id'], ['lessons.lesson_id'], name='lesson_progress_lesson_id_fkey'),
        ForeignKeyConstraint(['user_id'], ['users.user_id'], name='lesson_progress_user_id_fkey'),
        PrimaryKeyConstraint('progress_id', name='lesson_progress_pkey'),
        UniqueConstraint('user_id', 'lesson_id', name='lesson_progress_user_lesson_key'),
    )

    progress_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    lesson_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='not_started')
    last_watched: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)


class UserActivityLog(Base):
    __tablename__ = 'user_activity_log'
    __table_args__ = (
        ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE', name='user_activity_log_user_id_fkey'),
        PrimaryKeyConstraint('activity_id', name='user_activity_log_pkey'),
        UniqueConstraint('user_id', 'activity_date', name='user_activity_log_user_date_key'),
    )

    activity_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    activity_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)


class Leaderboard(Base):
    __tablename__ = 'leaderboard'
    __table_args__ = (
        ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE', name='leaderboard_user_id_fkey'),
        PrimaryKeyConstraint('leaderboard_id', name='leaderboard_pkey'),
        UniqueConstraint('user_id', name='leaderboard_user_id_key'),
    )

    leaderboard_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    streak_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_updated: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)

    user: Mapped['User'] = relationship('User', back_populates='leaderboard')
