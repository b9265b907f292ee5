"""
Built-in profile content used when the content directory has no profile.json.
"""

from typing import List

from .models import Education, Experience, GeneralFact, SkillGroup

DEFAULT_SKILLS = [
    SkillGroup(
        category="Frontend Development",
        skills=["React", "Next.js", "TypeScript", "JavaScript", "HTML", "CSS", "Tailwind CSS", "Framer Motion"],
        description="Expert in modern frontend technologies with focus on React ecosystem and performance optimization",
    ),
    SkillGroup(
        category="Machine Learning & AI",
        skills=["Python", "TensorFlow", "PyTorch", "Scikit-learn", "OpenAI API", "Hugging Face", "Computer Vision", "NLP"],
        description="Experienced in building ML models, AI applications, and integrating LLMs into web applications",
    ),
    SkillGroup(
        category="Backend & DevOps",
        skills=["Node.js", "PostgreSQL", "MongoDB", "Docker", "AWS", "Vercel", "Git", "CI/CD"],
        description="Proficient in full-stack development with cloud deployment and DevOps practices",
    ),
]

DEFAULT_EXPERIENCE = [
    Experience(
        title="Senior Frontend Developer",
        company="Tech Innovations Inc.",
        period="2022 - Present",
        description="Lead frontend development for enterprise applications using React and TypeScript. "
                    "Built scalable component libraries and mentored junior developers.",
        achievements=["Improved app performance by 40%", "Led team of 5 developers", "Implemented design system"],
    ),
    Experience(
        title="Full Stack Developer",
        company="StartupXYZ",
        period="2020 - 2022",
        description="Developed full-stack web applications using React, Node.js, and PostgreSQL. "
                    "Integrated AI features and built RESTful APIs.",
        achievements=["Built MVP from scratch", "Integrated OpenAI API", "Deployed on AWS"],
    ),
]

DEFAULT_EDUCATION: List[Education] = []


def default_general_facts(owner: str, contact_email: str) -> List[GeneralFact]:
    """Bio, contact and availability facts for the portfolio owner."""
    return [
        GeneralFact(
            topic=f"About {owner}",
            content=f"{owner} is a passionate full-stack developer and AI enthusiast with expertise in React, "
                    f"TypeScript, and machine learning. {owner} loves building innovative web applications "
                    f"that solve real-world problems.",
        ),
        GeneralFact(
            topic="Contact Information",
            content=f"You can reach {owner} via email at {contact_email} or connect on LinkedIn. {owner} is open "
                    f"to internship opportunities, collaboration projects, and full-time positions.",
        ),
        GeneralFact(
            topic="Availability",
            content=f"{owner} is currently available for new opportunities including full-time positions, "
                    f"consulting work, and interesting side projects. Particularly interested in AI/ML "
                    f"applications and modern web development.",
        ),
    ]
