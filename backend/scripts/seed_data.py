"""Seed the database with demo profiles, rules, issues and their changelogs."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime
from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.access_scope import ProjectPermission
from app.models.issue import ActionPlan, Component, Issue, IssueComment
from app.models.quality_profile import QualityProfile
from app.models.rule import DebtCharacteristic, Rule
from app.models.user import User
from app.services.change_record import ChangeType, Diff
from app.services.issue_service import update_issue
from app.services.profile_service import record_rule_change


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Users
        users = [
            User(login="admin", name="관리자 김철수", role="admin", email="admin@company.com"),
            User(login="marcel", name="Marcel", role="user", email="marcel@company.com"),
            User(login="julien", name="Julien", role="user", email="julien@company.com"),
        ]
        db.add_all(users)
        db.flush()
        db.add(ProjectPermission(user_id=users[1].user_id, project_kee="sample", permission="issueadmin"))

        # Rules with debt characteristics
        reliability = DebtCharacteristic(kee="RELIABILITY", name="Reliability")
        db.add(reliability)
        db.flush()
        exception_handling = DebtCharacteristic(kee="EXCEPTION_HANDLING", name="Exception handling",
                                                parent_id=reliability.characteristic_id)
        db.add(exception_handling)
        db.flush()
        rules = [
            Rule(rule_key="xoo:x1", name="X One", language="xoo", severity="MAJOR",
                 characteristic_id=exception_handling.characteristic_id),
            Rule(rule_key="xoo:x2", name="X Two", language="xoo", severity="MINOR"),
        ]
        db.add_all(rules)

        # Quality profile
        profile = QualityProfile(kee="XOO_P1", name="Sonar way", language="xoo")
        db.add(profile)

        # Components, action plan, issue
        db.add_all([
            Component(kee="sample", long_name="Sample Project", qualifier="TRK", project_kee="sample"),
            Component(kee="sample:src/Foo.xoo", long_name="src/Foo.xoo", qualifier="FIL", project_kee="sample"),
        ])
        db.add(ActionPlan(kee="plan-1", name="Sprint 1", project_kee="sample"))
        issue = Issue(kee="ISSUE-1", component_kee="sample:src/Foo.xoo", project_kee="sample",
                      rule_key="xoo:x1", line=42, severity="MAJOR", technical_debt=90,
                      reporter="julien", created_at=datetime(2016, 9, 1, 9, 0, 0))
        db.add(issue)
        db.commit()

        # Profile changelog (epoch millis)
        record_rule_change(db, profile=profile, change_type=ChangeType.ACTIVATED, rule_key="xoo:x1",
                           user_login="marcel", severity="MAJOR", inheritance="INHERITED",
                           params={"foo": "foo_value", "bar": "bar_value"}, created_at=1472720400000)
        record_rule_change(db, profile=profile, change_type=ChangeType.UPDATED, rule_key="xoo:x1",
                           user_login="admin", severity="CRITICAL",
                           params={"foo": Diff(old="foo_value", new="foo_new")}, created_at=1472806800000)
        record_rule_change(db, profile=profile, change_type=ChangeType.ACTIVATED, rule_key="xoo:x2",
                           severity="MINOR", created_at=1472893200000)

        # Issue changelog
        update_issue(db, issue=issue, changes={"severity": "CRITICAL", "assignee": "marcel"},
                     user_login="admin", created_at=1472724000000)
        update_issue(db, issue=issue, changes={"status": "CONFIRMED", "technicalDebt": 120},
                     user_login="marcel", created_at=1472810400000)
        db.add(IssueComment(kee="comment-1", issue_kee=issue.kee, user_login="marcel",
                            markdown_text="Confirmed.\nWill fix in Sprint 1."))
        db.commit()

        print("Seed data inserted successfully.")
        print(f"  Users: {len(users)}")
        print(f"  Rules: {len(rules)}")
        print(f"  Profile: {profile.kee} ({profile.language}/{profile.name})")
        print(f"  Issue: {issue.kee}")
        print()
        print("Test login credentials:")
        for u in users:
            print(f"  login={u.login}  role={u.role}  name={u.name}")

    except Exception as e:
        db.rollback()
        raise e
    finally:
        db.close()


if __name__ == "__main__":
    seed()
